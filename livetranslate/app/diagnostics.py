from __future__ import annotations


def summarize_exception(detail: str, *, max_len: int = 220) -> str:
    text = str(detail or "").strip()
    if not text:
        return "Unknown error."
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        return "Unknown error."
    for ln in reversed(lines):
        if ln.startswith("File "):
            continue
        if ln.startswith("^"):
            continue
        if ln.startswith("Traceback "):
            continue
        out = ln
        break
    else:
        out = lines[-1]
    if len(out) > max_len:
        return out[: max_len - 3].rstrip() + "..."
    return out


def hint_for_exception(summary: str) -> str:
    s = str(summary or "").lower()
    if "no module named" in s and ("faster_whisper" in s or "sounddevice" in s):
        return "Voice capture needs the speech extras: python -m pip install 'livetranslate[speech]'."
    if "no module named" in s:
        return "A required package is missing in this virtualenv. Reinstall dependencies and retry."
    if "connection refused" in s or "connecterror" in s or "all connection attempts failed" in s:
        return "Translation gateway is not reachable. Start it with `livetranslate-gateway` and check --server-url."
    if "status: 500" in s:
        return "Gateway reported a provider failure. Check TRANSLATE_PROVIDER_URL and the gateway log."
    if "config file not found" in s:
        return "Configured JSON file is missing. Update the config path or restore the file."
    if "portaudio" in s or ("sounddevice" in s and "failed" in s):
        return "Microphone init failed. Check input device selection and app mic permissions."
    return "Check logs for full traceback."
