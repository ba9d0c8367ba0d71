from __future__ import annotations

import argparse
import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from livetranslate.languages import LANGUAGES

DEFAULTS: dict[str, Any] = {
    "server_url": "http://127.0.0.1:8000",
    "translator": "gateway",
    "source_lang": "en",
    "target_lang": "es",
    "debounce_ms": 500,
    "poll_ms": 30,
    "request_timeout_sec": 10.0,
    "speech": True,
    "model": "tiny",
    "list_devices": False,
    "device": None,
    "sr": 16000,
    "channels": 1,
    "chunk_sec": 0.25,
    "rms_th": 250.0,
    "silence_chunks": 3,
    "max_listen_sec": 10.0,
    "debug": False,
}
CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULTS.keys())


@dataclass(frozen=True)
class AppPaths:
    config_dir: Path
    config_path: Path


def app_paths() -> AppPaths:
    config_dir = Path(user_config_dir("LiveTranslate", "LiveTranslate"))
    return AppPaths(config_dir=config_dir, config_path=config_dir / "config.json")


def _load_json_dict(path: Path) -> dict[str, Any]:
    # Accept UTF-8 with or without BOM for Windows-edited config files.
    with path.open("r", encoding="utf-8-sig") as f:
        loaded = json.load(f)
    if not isinstance(loaded, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return loaded


def _write_json_dict(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _known_only(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in CONFIG_KEYS:
        if key in payload:
            out[key] = payload[key]
    return out


def load_default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULTS)


def ensure_user_config_exists(defaults: dict[str, Any] | None = None) -> Path:
    paths = app_paths()
    if paths.config_path.exists():
        return paths.config_path
    _write_json_dict(paths.config_path, defaults or load_default_config())
    return paths.config_path


def load_user_config(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    defaults = load_default_config()
    if config_path:
        chosen = Path(config_path)
        if not chosen.exists():
            raise SystemExit(f"Config file not found: {chosen}")
    else:
        chosen = ensure_user_config_exists(defaults)
    merged = dict(defaults)
    merged.update(_known_only(_load_json_dict(chosen)))
    return merged, chosen


def resolve_defaults(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    return load_user_config(config_path=config_path)


def parser_with_defaults(defaults: dict[str, Any]) -> argparse.ArgumentParser:
    lang_codes = sorted(LANGUAGES.keys())
    p = argparse.ArgumentParser(prog="livetranslate")
    p.add_argument("--config", default=None, help="JSON config path (CLI flags override config)")
    p.add_argument("--server-url", default=defaults["server_url"], help="base URL of the translation gateway")
    p.add_argument("--translator", default=defaults["translator"], help="gateway | stub")
    p.add_argument("--source-lang", default=defaults["source_lang"], choices=lang_codes, help="input language")
    p.add_argument("--target-lang", default=defaults["target_lang"], choices=lang_codes, help="translation language")
    p.add_argument(
        "--debounce-ms",
        type=int,
        default=defaults["debounce_ms"],
        help="quiet period after the last edit before translating",
    )
    p.add_argument("--poll-ms", type=int, default=defaults["poll_ms"], help="UI event poll interval (ms)")
    p.add_argument(
        "--request-timeout-sec",
        type=float,
        default=defaults["request_timeout_sec"],
        help="timeout for one gateway request",
    )
    p.add_argument(
        "--speech",
        action=argparse.BooleanOptionalAction,
        default=defaults["speech"],
        help="enable voice capture (needs faster-whisper and sounddevice)",
    )
    p.add_argument("--model", default=defaults["model"], help="faster-whisper model size")
    p.add_argument("--list-devices", action="store_true", help="print audio devices and exit")
    p.add_argument("--device", type=int, default=defaults["device"], help="sounddevice input device id")
    p.add_argument("--sr", type=int, default=defaults["sr"], help="sample rate (Hz)")
    p.add_argument("--channels", type=int, default=defaults["channels"], help="input channels")
    p.add_argument("--chunk-sec", type=float, default=defaults["chunk_sec"], help="mic chunk size in seconds")
    p.add_argument("--rms-th", type=float, default=defaults["rms_th"], help="RMS threshold for speech VAD")
    p.add_argument(
        "--silence-chunks",
        type=int,
        default=defaults["silence_chunks"],
        help="end a capture after this many non-speech chunks",
    )
    p.add_argument(
        "--max-listen-sec",
        type=float,
        default=defaults["max_listen_sec"],
        help="give up a capture session after this many seconds",
    )
    p.add_argument("--debug", action="store_true", help="log chunk RMS and speech decisions")
    return p


def resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    defaults, _ = resolve_defaults(config_path=pre_args.config)
    parser = parser_with_defaults(defaults)
    args = parser.parse_args(argv)
    if defaults.get("list_devices"):
        args.list_devices = True
    if defaults.get("debug"):
        args.debug = True
    return args
