"""Static skeleton schema: bone topology, lengths and attachment offsets.

The figure has two roots anchored at the navel: the torso chain (growing
up, torso angle 180 = upright) and the pelvis chain (growing down). Arm
and leg chains hang off the distal ends of those roots at fixed lateral
offsets. Only pose angles change at runtime; this module never does.
"""

from dataclasses import dataclass
from typing import Optional

from bitruvius.constants import (
    FOOT, HAND, HEAD, HIP_OFFSET_X, LEG_LOWER, LEG_UPPER, LOWER_ARM, NECK,
    NECK_SINK, PELVIS, SHOULDER_LIFT, SHOULDER_OFFSET_X, TOES, TORSO,
    UPPER_ARM,
)


@dataclass(frozen=True)
class BoneDef:
    """One bone of the schema.

    The bone's local rotation is ``rest_angle + mirror * pose[joint]``.
    ``offset`` is the attachment point in the parent's child frame (the
    parent's distal end, counter-rotated by the parent's corrective).
    ``proximal`` / ``distal`` name the joint positions reported by FK.
    """
    name: str
    parent: Optional[str]
    length: float
    offset: tuple[float, float] = (0.0, 0.0)
    rest_angle: float = 0.0
    mirror: float = 1.0
    joint: Optional[str] = None
    corrective: Optional[str] = None
    proximal: Optional[str] = None
    distal: Optional[str] = None


def _arm(side: str, offset_x: float, rest_angle: float, mirror: float) -> list[BoneDef]:
    s = side
    return [
        BoneDef(f"{s}_upper_arm", "torso", UPPER_ARM,
                offset=(offset_x, SHOULDER_LIFT), rest_angle=rest_angle, mirror=mirror,
                joint=f"{s}_shoulder", corrective=f"{s}_bicep_corrective",
                proximal=f"{s}_shoulder", distal=f"{s}_elbow"),
        BoneDef(f"{s}_lower_arm", f"{s}_upper_arm", LOWER_ARM,
                joint=f"{s}_forearm", distal=f"{s}_wrist"),
        BoneDef(f"{s}_hand", f"{s}_lower_arm", HAND,
                joint=f"{s}_wrist", distal=f"{s}_hand_tip"),
    ]


def _leg(side: str, offset_x: float, foot_rest: float) -> list[BoneDef]:
    s = side
    return [
        BoneDef(f"{s}_upper_leg", "pelvis", LEG_UPPER,
                offset=(offset_x, 0.0),
                joint=f"{s}_thigh", corrective=f"{s}_thigh_corrective",
                proximal=f"{s}_hip", distal=f"{s}_knee"),
        BoneDef(f"{s}_lower_leg", f"{s}_upper_leg", LEG_LOWER,
                joint=f"{s}_calf", distal=f"{s}_ankle"),
        # Foot base angle makes ankle 0 mean "foot flat"
        BoneDef(f"{s}_foot", f"{s}_lower_leg", FOOT,
                rest_angle=foot_rest, joint=f"{s}_ankle", distal=f"{s}_toe_base"),
        BoneDef(f"{s}_toe", f"{s}_foot", TOES,
                joint=f"{s}_toes", distal=f"{s}_toe_tip"),
    ]


# Parents always precede their children.
SKELETON: tuple[BoneDef, ...] = tuple([
    BoneDef("torso", None, TORSO, joint="torso", proximal="navel", distal="chest"),
    BoneDef("neck", "torso", NECK, offset=(0.0, NECK_SINK),
            joint="neck", proximal="neck_base", distal="head_base"),
    BoneDef("head", "neck", HEAD, distal="head_top"),
    *_arm("r", -SHOULDER_OFFSET_X, 90.0, 1.0),
    *_arm("l", SHOULDER_OFFSET_X, -90.0, -1.0),
    BoneDef("pelvis", None, PELVIS, joint="hips", proximal="navel", distal="pelvis_base"),
    *_leg("r", HIP_OFFSET_X, -90.0),
    *_leg("l", -HIP_OFFSET_X, 90.0),
])

BONES: dict[str, BoneDef] = {bone.name: bone for bone in SKELETON}


def children_of(name: str) -> list[BoneDef]:
    return [bone for bone in SKELETON if bone.parent == name]


def chain_to(name: str) -> list[BoneDef]:
    """Bones from the chain root down to (and including) *name*."""
    chain = []
    bone: Optional[BoneDef] = BONES[name]
    while bone is not None:
        chain.append(bone)
        bone = BONES[bone.parent] if bone.parent else None
    chain.reverse()
    return chain


def joint_names() -> list[str]:
    """Every joint position name reported by forward kinematics."""
    names: list[str] = []
    for bone in SKELETON:
        for name in (bone.proximal, bone.distal):
            if name and name not in names:
                names.append(name)
    return names


@dataclass(frozen=True)
class LimbChain:
    """A two-bone chain addressable by the IK tools."""
    name: str
    upper: str
    lower: str

    @property
    def effector(self) -> str:
        return BONES[self.lower].distal


LIMBS: dict[str, LimbChain] = {
    "l_arm": LimbChain("l_arm", "l_upper_arm", "l_lower_arm"),
    "r_arm": LimbChain("r_arm", "r_upper_arm", "r_lower_arm"),
    "l_leg": LimbChain("l_leg", "l_upper_leg", "l_lower_leg"),
    "r_leg": LimbChain("r_leg", "r_upper_leg", "r_lower_leg"),
}
