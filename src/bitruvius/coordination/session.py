"""Editing session orchestrator.

Owns the frame sequence and every controller acting on it (history,
auto-record, playback, overlay activity, visibility, joint limits and
tethers) and is the single entry point controls and renderers talk to.
State changes are announced on the EventBus.
"""

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from bitruvius.animation.activity import ActivityMonitor, OverlayMode
from bitruvius.animation.auto_record import AutoRecorder
from bitruvius.animation.cartridges import CartridgeLibrary
from bitruvius.animation.history import SequenceHistory
from bitruvius.animation.playback import PlaybackScheduler
from bitruvius.animation.sequence import (
    FrameSequence, SequenceState, frames_from_data, frames_to_data,
)
from bitruvius.body.inverse_kinematics import effector_position, solve_limb_ik
from bitruvius.body.joint_limits import JointLimits
from bitruvius.body.kinematics import resolve_joints
from bitruvius.body.skeleton import BONES, LIMBS
from bitruvius.core.config_loader import load_json, save_json
from bitruvius.core.events import EventBus, EventType
from bitruvius.core.math_utils import Vec2, vec2
from bitruvius.core.state import (
    JS_KEY_MAP, Pose, SessionConfig, apply_edit,
)
from bitruvius.coordination.visibility import VisibilityMap

logger = logging.getLogger(__name__)


class EditingSession:
    """One logical editing session over a looping frame sequence.

    Edit gestures follow the pointer-down / drag / pointer-up pattern:
    ``begin_gesture()`` marks the undo boundary, then any number of
    ``change_pose()`` calls refine the working frame in place.
    """

    def __init__(self, config: Optional[SessionConfig] = None,
                 event_bus: Optional[EventBus] = None):
        self.config = config if config is not None else SessionConfig()
        self.event_bus = event_bus if event_bus is not None else EventBus()

        self.sequence = FrameSequence(max_frames=self.config.max_frames)
        self.history = SequenceHistory(self.sequence)
        self.recorder = AutoRecorder(threshold=self.config.recording_threshold)
        self.playback = PlaybackScheduler(self.sequence, fps=self.config.fps)
        self.playback.set_tweening(self.config.tweening)
        self.playback.on_frame = self._on_playback_frame
        self.activity = ActivityMonitor(timeout_ms=self.config.activity_timeout_ms)
        self.visibility = VisibilityMap()
        self.cartridges = CartridgeLibrary()

        self.joint_limits = JointLimits()
        if self.config.clamp_to_limits:
            self.joint_limits.load()

        # limb name -> pinned world position of its effector
        self.tethers: dict[str, Vec2] = {}
        self.base_pivot_locked = False

    # ── Queries ───────────────────────────────────────────────────

    @property
    def frames(self) -> tuple[Pose, ...]:
        return self.sequence.frames

    @property
    def index(self) -> int:
        return self.sequence.index

    @property
    def current_pose(self) -> Pose:
        return self.sequence.current

    @property
    def display_pose(self) -> Pose:
        return self.playback.display_pose

    @property
    def is_recording(self) -> bool:
        return self.recorder.enabled

    @property
    def is_playing(self) -> bool:
        return self.playback.is_playing

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def joint_positions(self) -> dict[str, Vec2]:
        """World positions of every joint of the displayed pose."""
        return resolve_joints(self.display_pose)

    # ── Pose editing ──────────────────────────────────────────────

    def begin_gesture(self) -> None:
        """Start one undoable edit gesture (pointer-down on a control)."""
        self._stop_playback()
        self.history.snapshot()
        self._publish_history()

    def change_pose(self, updates: Mapping[str, Any]) -> Pose:
        """Apply a partial update to the working frame.

        The result is clamped to joint limits, tethered limbs are
        re-solved onto their pins, and the auto-recorder decides whether
        the edit becomes a new keyframe.
        """
        self._stop_playback()
        if self.base_pivot_locked:
            updates = {k: v for k, v in updates.items()
                       if k not in ("root", "root_rotation", "rootRotation")}

        edited = {JS_KEY_MAP.get(k, k) for k in updates}
        candidate = apply_edit(self.sequence.current, updates)
        if self.config.clamp_to_limits:
            # Values the edit did not touch keep whatever they were loaded with
            candidate = self.joint_limits.clamp(candidate, edited)
        candidate = self._apply_tethers(candidate, edited)

        count = len(self.sequence)
        recorded = self.recorder.update(self.sequence, candidate)
        if recorded:
            self.event_bus.publish(EventType.FRAME_RECORDED,
                                   index=self.sequence.index,
                                   deviation=self.recorder.last_deviation)
        if len(self.sequence) != count:
            self._publish_frames()
            self._publish_history()
        self._publish_pose()
        return self.sequence.current

    def load_pose(self, pose: Pose) -> None:
        """Replace the working frame with *pose* as one undoable step."""
        self._stop_playback()
        self.sequence.replace_current(pose)
        self._publish_history()
        self._publish_pose()

    def load_pose_data(self, record: Mapping[str, Any]) -> None:
        """Paste a pose record (missing fields come from the default pose)."""
        self.load_pose(Pose.from_dict(record))

    # ── Frame operations ──────────────────────────────────────────

    def add_frame(self) -> SequenceState:
        return self._frame_op(self.sequence.add_frame)

    def insert_between(self) -> SequenceState:
        return self._frame_op(self.sequence.insert_between)

    def delete_frame(self) -> SequenceState:
        return self._frame_op(self.sequence.delete_frame)

    def select_frame(self, index: int) -> SequenceState:
        self._stop_playback()
        state = self.sequence.select_frame(index)
        self.event_bus.publish(EventType.FRAME_SELECTED, index=state.index)
        self._publish_pose()
        return state

    def _frame_op(self, op) -> SequenceState:
        self._stop_playback()
        before = len(self.sequence)
        state = op()
        if len(state.frames) != before:
            self._publish_frames()
            self._publish_history()
            self._publish_pose()
        return state

    # ── History ───────────────────────────────────────────────────

    def undo(self) -> Optional[SequenceState]:
        self._stop_playback()
        restored = self.history.undo()
        if restored is not None:
            self._after_restore()
        return restored

    def redo(self) -> Optional[SequenceState]:
        self._stop_playback()
        restored = self.history.redo()
        if restored is not None:
            self._after_restore()
        return restored

    def _after_restore(self) -> None:
        self._publish_frames()
        self._publish_history()
        self._publish_pose()

    # ── Modes ─────────────────────────────────────────────────────

    def set_recording(self, enabled: bool) -> None:
        self._stop_playback()
        if self.recorder.enabled == bool(enabled):
            return
        self.recorder.enabled = bool(enabled)
        logger.info("Live recording %s", "enabled" if enabled else "disabled")
        self.event_bus.publish(EventType.RECORDING_TOGGLED, enabled=self.recorder.enabled)

    def toggle_recording(self) -> bool:
        self.set_recording(not self.recorder.enabled)
        return self.recorder.enabled

    def play(self, now: Optional[float] = None) -> None:
        self.playback.play(now)
        self.event_bus.publish(EventType.ANIM_PLAY)

    def pause(self) -> None:
        self._stop_playback()

    def toggle_play(self, now: Optional[float] = None) -> bool:
        if self.playback.is_playing:
            self.pause()
        else:
            self.play(now)
        return self.playback.is_playing

    def set_tweening(self, enabled: bool, now: Optional[float] = None) -> None:
        self.playback.set_tweening(enabled, now)
        self.event_bus.publish(EventType.TWEEN_TOGGLED, enabled=self.playback.is_tweening)

    def set_fps(self, fps: int, now: Optional[float] = None) -> None:
        self.playback.set_fps(fps, now)
        self.event_bus.publish(EventType.FPS_CHANGED, fps=self.playback.fps)

    def _stop_playback(self) -> None:
        if self.playback.is_playing:
            self.playback.pause()
            self.event_bus.publish(EventType.ANIM_PAUSE)
            self._publish_pose()

    # ── Per-frame tick ────────────────────────────────────────────

    def tick(self, now: float) -> Pose:
        """Advance playback and the overlay timer to *now* (ms)."""
        self.playback.tick(now)
        pose = self.display_pose
        self.activity.observe(pose, now)
        return pose

    def _on_playback_frame(self, index: int, pose: Pose) -> None:
        self.event_bus.publish(EventType.ANIM_PROGRESS, index=index, pose=pose)

    # ── Display options ───────────────────────────────────────────

    def set_overlay_mode(self, mode: OverlayMode | str) -> None:
        self.activity.mode = OverlayMode(mode)
        self.event_bus.publish(EventType.OVERLAY_MODE_CHANGED, mode=self.activity.mode)

    def show_overlay(self, now: float) -> bool:
        return self.activity.show_overlay(now)

    def toggle_visibility(self, key: str) -> bool:
        visible = self.visibility.toggle(JS_KEY_MAP.get(key, key))
        self._publish_visibility()
        return visible

    def isolate_visibility(self, key: str) -> None:
        self.visibility.isolate(JS_KEY_MAP.get(key, key))
        self._publish_visibility()

    # ── Root and tethers ──────────────────────────────────────────

    def set_base_pivot_locked(self, locked: bool) -> None:
        """Locking recentres the root and blocks root edits until unlocked."""
        if locked and not self.base_pivot_locked:
            self.load_pose(apply_edit(self.sequence.current,
                                      {"root": (0.0, 0.0), "root_rotation": 0.0}))
        self.base_pivot_locked = bool(locked)

    def tether(self, limb: str, target: Optional[Vec2] = None) -> Vec2:
        """Pin *limb*'s effector (wrist or ankle) to *target* or to where it is now."""
        if limb not in LIMBS:
            raise ValueError(f"Unknown limb {limb!r}")
        pin = vec2(*target) if target is not None else effector_position(self.sequence.current, limb)
        self.tethers[limb] = pin
        logger.debug("Tethered %s at (%.1f, %.1f)", limb, pin[0], pin[1])
        return pin

    def untether(self, limb: str) -> None:
        self.tethers.pop(limb, None)

    def _apply_tethers(self, pose: Pose, edited: set[str]) -> Pose:
        for limb, pin in list(self.tethers.items()):
            chain = LIMBS[limb]
            # A direct edit of the tethered chain wins and moves its pin
            if {BONES[chain.upper].joint, BONES[chain.lower].joint} & edited:
                self.tethers[limb] = effector_position(pose, limb)
                continue
            pose = solve_limb_ik(pose, limb, pin)
        return pose

    # ── Cartridges ────────────────────────────────────────────────

    def load_cartridge(self, path: Optional[Path] = None) -> list[str]:
        self.cartridges.load(path)
        name = Path(path).stem if path is not None else "builtin"
        self.event_bus.publish(EventType.CARTRIDGE_LOADED, name=name, count=len(self.cartridges))
        return self.cartridges.names()

    def load_cartridge_pose(self, name: str) -> bool:
        pose = self.cartridges.get_pose(name)
        if pose is None:
            logger.debug("No cartridge pose named %r", name)
            return False
        self.load_pose(pose)
        return True

    # ── Import / export ───────────────────────────────────────────

    def export_data(self) -> Any:
        return frames_to_data(self.sequence.frames)

    def import_data(self, data: Any) -> None:
        """Replace the whole sequence with imported frames (undoable)."""
        frames = frames_from_data(data)
        if len(frames) > self.sequence.max_frames:
            logger.warning("Imported %d frames, keeping the first %d",
                           len(frames), self.sequence.max_frames)
            frames = frames[:self.sequence.max_frames]
        self._stop_playback()
        self.history.snapshot()
        self.sequence.restore(SequenceState(tuple(frames), 0))
        self._after_restore()

    def save(self, path: Path) -> None:
        save_json(path, self.export_data())
        logger.info("Saved %d frames to %s", len(self.sequence), path)

    def load(self, path: Path) -> None:
        self.import_data(load_json(path))
        logger.info("Loaded %d frames from %s", len(self.sequence), path)

    def iter_export_frames(self) -> Iterator[tuple[int, Pose]]:
        """Select each frame in turn for an external renderer.

        Playback and recording are stopped first; the previous selection
        is restored when the iteration finishes or is abandoned.
        """
        self._stop_playback()
        self.set_recording(False)
        previous = self.sequence.index
        try:
            for i in range(len(self.sequence)):
                self.sequence.select_frame(i)
                yield i, self.sequence.current
        finally:
            self.sequence.select_frame(previous)

    # ── Event helpers ─────────────────────────────────────────────

    def _publish_pose(self) -> None:
        self.event_bus.publish(EventType.POSE_CHANGED, pose=self.display_pose)

    def _publish_frames(self) -> None:
        self.event_bus.publish(EventType.FRAMES_CHANGED,
                               count=len(self.sequence), index=self.sequence.index)

    def _publish_history(self) -> None:
        self.event_bus.publish(EventType.HISTORY_CHANGED,
                               can_undo=self.history.can_undo,
                               can_redo=self.history.can_redo)

    def _publish_visibility(self) -> None:
        self.event_bus.publish(EventType.VISIBILITY_CHANGED,
                               hidden=set(self.visibility.hidden()))
