"""Audio collaborators for cue and completion events.

Players never raise: a cue that cannot be played is dropped.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Callable, Protocol, TextIO


logger = logging.getLogger(__name__)

AudioReady = Callable[[], bool]


class CuePlayer(Protocol):
    def play_cue(self) -> None: ...

    def play_finish(self) -> None: ...


def _always_ready() -> bool:
    return True


class SilentCues:
    def play_cue(self) -> None:
        return None

    def play_finish(self) -> None:
        return None


class TerminalBell:
    def __init__(self, stream: TextIO | None = None, can_play_audio: AudioReady = _always_ready) -> None:
        self._stream = stream
        self._can_play_audio = can_play_audio

    def play_cue(self) -> None:
        self._ring(1)

    def play_finish(self) -> None:
        self._ring(2)

    def _ring(self, count: int) -> None:
        if not self._can_play_audio():
            return
        stream = self._stream or sys.stdout
        try:
            stream.write("\a" * count)
            stream.flush()
        except (OSError, ValueError) as exc:
            logger.warning("Terminal bell unavailable: %s", exc)


# Shared AudioContext on window; browsers start it suspended until a user gesture.
_ENSURE_CONTEXT_JS = """
const ensureCtx = () => {
  let ctx = window.__repsetAudio;
  if (!ctx || ctx.state === 'closed') {
    const Ctor = window.AudioContext || window.webkitAudioContext;
    if (!Ctor) return null;
    ctx = window.__repsetAudio = new Ctor();
  }
  if (ctx.state === 'suspended') ctx.resume().catch(() => {});
  return ctx;
};
"""

UNLOCK_AUDIO_JS = (
    "(() => {"
    + _ENSURE_CONTEXT_JS
    + """
  const ctx = ensureCtx();
  if (!ctx) return;
  try {
    const osc = ctx.createOscillator();
    const gain = ctx.createGain();
    osc.type = 'triangle';
    osc.frequency.value = 600;
    gain.gain.value = 0.02;
    osc.connect(gain);
    gain.connect(ctx.destination);
    osc.start(ctx.currentTime);
    osc.stop(ctx.currentTime + 0.05);
  } catch (e) {}
})();
"""
)


def beep_js(freq_hz: int = 440, duration_ms: int = 230) -> str:
    return (
        "(() => {"
        + _ENSURE_CONTEXT_JS
        + f"""
  const ctx = ensureCtx();
  if (!ctx) return;
  try {{
    const osc = ctx.createOscillator();
    const gain = ctx.createGain();
    const now = ctx.currentTime;
    osc.type = 'triangle';
    osc.frequency.value = {int(freq_hz)};
    gain.gain.setValueAtTime(0, now);
    gain.gain.linearRampToValueAtTime(0.09, now + 0.002);
    gain.gain.linearRampToValueAtTime(0.0001, now + {duration_ms / 1000:.3f});
    osc.connect(gain);
    gain.connect(ctx.destination);
    osc.start(now);
    osc.stop(now + {duration_ms / 1000 + 0.01:.3f});
  }} catch (e) {{}}
}})();
"""
    )


def sample_js(url: str, fallback_freq_hz: int = 660) -> str:
    fallback = beep_js(fallback_freq_hz)
    return (
        "(async () => {"
        + _ENSURE_CONTEXT_JS
        + f"""
  const ctx = ensureCtx();
  if (!ctx) return;
  try {{
    if (!window.__repsetSample) {{
      const resp = await fetch({json.dumps(url)});
      if (!resp.ok) throw new Error('sample unavailable');
      window.__repsetSample = await ctx.decodeAudioData(await resp.arrayBuffer());
    }}
    const src = ctx.createBufferSource();
    src.buffer = window.__repsetSample;
    src.connect(ctx.destination);
    src.start();
  }} catch (e) {{
    {fallback}
  }}
}})();
"""
    )


class WebAudioCues:
    """Play cues in the browser through a JavaScript runner such as ``ui.run_javascript``."""

    def __init__(
        self,
        run_javascript: Callable[[str], object],
        can_play_audio: AudioReady = _always_ready,
        sample_url: str | None = None,
    ) -> None:
        self._run_javascript = run_javascript
        self._can_play_audio = can_play_audio
        self._sample_url = sample_url
        self.enabled = True

    def play_cue(self) -> None:
        if self._sample_url:
            self._run(sample_js(self._sample_url))
        else:
            self._run(beep_js(660))

    def play_finish(self) -> None:
        self._run(beep_js(880, duration_ms=600))

    def _run(self, script: str) -> None:
        if not self.enabled or not self._can_play_audio():
            return
        try:
            self._run_javascript(script)
        except Exception as exc:
            logger.warning("Browser cue playback failed: %s", exc)
