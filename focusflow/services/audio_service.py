# -*- coding: utf-8 -*-

import logging
from pathlib import Path
from typing import Optional

import pygame

from focusflow.constants import CHIME_VOLUME, DEFAULT_VOLUME, SOUNDS_BY_ID

logger = logging.getLogger(__name__)


class AudioError(Exception):
    """Playback was rejected or the audio device is unavailable."""


class PygameAudioSink:
    """
    Thin wrapper over pygame.mixer.music (a single streamed clip) plus
    one-shot Sound objects for chimes. The mixer is opened on first use.
    """

    def __init__(self):
        self._ready = False

    def _ensure_mixer(self) -> None:
        if self._ready:
            return
        try:
            pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            raise AudioError(f"Audio device unavailable: {e}") from e
        self._ready = True

    def load(self, path: Path) -> None:
        self._ensure_mixer()
        try:
            pygame.mixer.music.load(str(path))
        except pygame.error as e:
            raise AudioError(f"Cannot load {path}: {e}") from e

    def play(self, loop: bool = True) -> None:
        self._ensure_mixer()
        try:
            pygame.mixer.music.play(loops=-1 if loop else 0)
        except pygame.error as e:
            raise AudioError(f"Playback failed: {e}") from e

    def pause(self) -> None:
        if self._ready:
            pygame.mixer.music.pause()

    def unpause(self) -> None:
        self._ensure_mixer()
        pygame.mixer.music.unpause()

    def stop(self) -> None:
        if self._ready:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()

    def set_volume(self, volume: float) -> None:
        if self._ready:
            pygame.mixer.music.set_volume(volume)

    def play_chime(self, path: Path, volume: float = CHIME_VOLUME) -> None:
        self._ensure_mixer()
        try:
            sound = pygame.mixer.Sound(str(path))
        except (pygame.error, FileNotFoundError) as e:
            raise AudioError(f"Cannot load chime {path}: {e}") from e
        sound.set_volume(volume)
        sound.play()

    def close(self) -> None:
        if self._ready:
            pygame.mixer.quit()
            self._ready = False


class AmbientPlayer:
    """
    One exclusive slot for the looping background sound.
    Starting a new sound always stops the previous one first.
    Audio failures are logged and leave the player stopped.
    """

    def __init__(self, sink, sounds_dir: Path, volume: float = DEFAULT_VOLUME):
        self.sink = sink
        self.sounds_dir = Path(sounds_dir)
        self.volume = volume
        self.current_sound: Optional[str] = None
        self.is_playing = False

    def path_for(self, sound_id: str) -> Path:
        try:
            option = SOUNDS_BY_ID[sound_id]
        except KeyError:
            raise ValueError(f"Unknown sound: {sound_id}")
        return self.sounds_dir / option.filename

    def play(self, sound_id: str) -> bool:
        """Start ``sound_id``; pressing play on the sound already playing pauses it."""
        path = self.path_for(sound_id)

        if self.current_sound == sound_id and self.is_playing:
            self.pause()
            return False

        try:
            if self.current_sound is not None:
                self.sink.stop()
                self.current_sound = None
            self.sink.load(path)
            self.sink.set_volume(self.volume)
            self.sink.play(loop=True)
        except AudioError:
            logger.error("Could not play %s", sound_id, exc_info=True)
            self.is_playing = False
            return False

        self.current_sound = sound_id
        self.is_playing = True
        logger.info("Playing ambient sound %s", sound_id)
        return True

    def pause(self) -> None:
        if self.current_sound is None:
            return
        self.sink.pause()
        self.is_playing = False

    def resume(self) -> bool:
        if self.current_sound is None:
            return False
        try:
            self.sink.unpause()
        except AudioError:
            logger.error("Could not resume %s", self.current_sound, exc_info=True)
            self.is_playing = False
            return False
        self.is_playing = True
        return True

    def toggle(self) -> bool:
        if self.is_playing:
            self.pause()
            return False
        return self.resume()

    def stop(self) -> None:
        if self.current_sound is None:
            return
        self.sink.stop()
        self.current_sound = None
        self.is_playing = False

    def set_volume(self, volume: float) -> float:
        self.volume = max(0.0, min(1.0, float(volume)))
        self.sink.set_volume(self.volume)
        return self.volume

    def play_chime(self, path: Path) -> None:
        try:
            self.sink.play_chime(path)
        except AudioError:
            logger.warning("Could not play chime %s", path, exc_info=True)

    def release(self) -> None:
        self.stop()
        self.sink.close()
