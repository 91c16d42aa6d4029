"""
Command-Line Interface for tts-playground.

Runs the HTTP server, inspects voices and prices, and synthesizes
directly against Google (no server) or through a running server.

Usage Examples:
    # Run the API + browser console on PORT (default 7069)
    tts-playground serve

    # List Chirp HD voices for one language
    tts-playground voices --language en-US --type CHIRP_HD

    # Price table and a quick estimate
    tts-playground pricing
    tts-playground estimate --type NEURAL2 --chars 1200
    tts-playground estimate --type STANDARD --text "Hello"

    # Synthesize without the server
    tts-playground synth "Hello there" --voice en-US-Neural2-C --out hello.mp3

    # Synthesize through a running server, as the console does
    tts-playground console "Hello there" --voice en-US-Neural2-C --url http://127.0.0.1:7069

Environment Variables:
    HOST / PORT: serve bind address
    GOOGLE_APPLICATION_CREDENTIALS: service-account file for voices/synth
    TTS_PLAYGROUND_SETTINGS: settings file (default config/settings.yaml)
    TTS_PLAYGROUND_LOG_LEVEL: 1-4
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from tts_playground.core.config import load_settings
from tts_playground.core.errors import PlaygroundError
from tts_playground.core.logging import configure_logging, get_logger, info, set_request_id
from tts_playground.voices.pricing import CURRENCY, estimate_cost, pricing_table, rate_for
from tts_playground.voices.tiers import VoiceTier, tier_label

_EXTENSIONS = {
    "MP3": ".mp3",
    "OGG_OPUS": ".ogg",
    "LINEAR16": ".wav",
    "MULAW": ".ulaw",
}


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed argument namespace; `command` names the subcommand.
    """
    parser = argparse.ArgumentParser(
        prog="tts-playground",
        description="tts-playground CLI (Google TTS voice playground)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API and browser console")
    serve.add_argument("--host", help="Bind address (default HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, help="Port (default PORT or 7069)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    voices = sub.add_parser("voices", help="List available voices")
    voices.add_argument("--language", help="Only voices supporting this language tag")
    voices.add_argument("--type", dest="voice_type", choices=[t.value for t in VoiceTier],
                        help="Only voices of this tier")
    voices.add_argument("--json", action="store_true", help="Print JSON")

    pricing = sub.add_parser("pricing", help="Print the pricing table")
    pricing.add_argument("--json", action="store_true", help="Print JSON")

    estimate = sub.add_parser("estimate", help="Estimate the cost of a synthesis")
    estimate.add_argument("--type", dest="voice_type", required=True,
                          help="Voice tier (STANDARD, NEURAL2, CHIRP_HD, ...)")
    count = estimate.add_mutually_exclusive_group(required=True)
    count.add_argument("--chars", type=int, help="Character count")
    count.add_argument("--text", help="Text whose length is billed")

    synth = sub.add_parser("synth", help="Synthesize directly against Google (no server)")
    synth.add_argument("text", help="Text (or SSML with --ssml) to synthesize")
    synth.add_argument("--voice", required=True, help="Voice name")
    synth.add_argument("--language", help="Language override")
    synth.add_argument("--encoding", choices=["MP3", "OGG_OPUS", "LINEAR16", "MULAW"],
                       help="Audio encoding (default synthesis.default_encoding)")
    synth.add_argument("--ssml", action="store_true", help="Treat the text as SSML")
    synth.add_argument("--rate", type=float, help="Speaking rate (0.25-4.0)")
    synth.add_argument("--pitch", type=float, help="Pitch in semitones (-20..20)")
    synth.add_argument("--gain", type=float, help="Volume gain in dB (-96..16)")
    synth.add_argument("--out", help="Output path (default out.<ext>)")
    synth.add_argument("--json", action="store_true", help="Print JSON summary")

    console = sub.add_parser("console", help="Synthesize through a running server")
    console.add_argument("text", help="Text to synthesize")
    console.add_argument("--voice", required=True, help="Voice name")
    console.add_argument("--url", default="http://127.0.0.1:7069", help="Server base URL")
    console.add_argument("--out", help="Output path (default out.<ext>)")

    return parser.parse_args(argv)


def _output_path(out: Optional[str], encoding: str) -> Path:
    out_path = Path(out or f"out{_EXTENSIONS.get(encoding, '.bin')}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    return out_path


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    config = load_settings().get_config()
    host = args.host or config.server.host
    port = args.port or config.server.port
    uvicorn.run("tts_playground.main:app", host=host, port=port, reload=args.reload)
    return 0


def _cmd_voices(args: argparse.Namespace) -> int:
    from tts_playground.services.synthesis_service import build_service

    service = build_service(load_settings())
    voices = [
        v for v in service.directory.get_voices()
        if (not args.language or args.language in v.language_codes)
        and (not args.voice_type or v.voice_type.value == args.voice_type)
    ]
    voices.sort(key=lambda v: v.name)

    if args.json:
        print(json.dumps([v.to_dict() for v in voices], ensure_ascii=False))
        return 0
    for v in voices:
        print(f"{v.name:<32} {v.voice_type.value:<9} {v.ssml_gender:<8} {','.join(v.language_codes)}")
    print(f"{len(voices)} voices")
    return 0


def _cmd_pricing(args: argparse.Namespace) -> int:
    table = pricing_table()
    if args.json:
        print(json.dumps(table, ensure_ascii=False))
        return 0
    print(f"{CURRENCY} per 1M characters")
    for tier, rate in table["per1MCharacters"].items():
        print(f"  {tier_label(tier):<12} {rate:>8}")
    print(table["note"])
    return 0


def _cmd_estimate(args: argparse.Namespace) -> int:
    tier = args.voice_type.upper()
    chars = args.chars if args.chars is not None else len(args.text)
    if chars < 0:
        raise SystemExit("--chars must be non-negative.")
    cost = estimate_cost(tier, chars)
    print(json.dumps({
        "voiceType": tier,
        "charCount": chars,
        "per1MCharactersUsd": rate_for(tier),
        "estimatedCostUsd": cost,
    }))
    return 0


def _cmd_synth(args: argparse.Namespace) -> int:
    from tts_playground.services.synthesis_service import SynthesizeRequest, build_service

    log = get_logger("tts-playground.cli")
    settings = load_settings()
    service = build_service(settings)
    request = SynthesizeRequest(
        text=args.text,
        voice_name=args.voice,
        input_type="ssml" if args.ssml else "text",
        language_code=args.language,
        audio_encoding=args.encoding or settings.get_config().synthesis.default_encoding,
        speaking_rate=args.rate,
        pitch=args.pitch,
        volume_gain_db=args.gain,
    )
    result = service.synthesize(request)

    out_path = _output_path(args.out, result.encoding)
    out_path.write_bytes(result.audio)
    info(log, "synth_written", out=str(out_path), bytes=len(result.audio))

    summary = result.to_dict()
    summary["audio"] = {"out": str(out_path), "bytes": len(result.audio), "mimeType": result.mime_type}
    if args.json:
        print(json.dumps(summary, ensure_ascii=False))
    else:
        for w in result.warnings:
            print(f"warning: {w}")
        print(f"{out_path} ({len(result.audio)} bytes, {result.tts_ms} ms, ~${result.estimated_cost_usd:.6f})")
    return 0


def _cmd_console(args: argparse.Namespace) -> int:
    from tts_playground.console.session import ConsoleError, ConsoleSession, format_usd

    with ConsoleSession(args.url) as session:
        try:
            session.load()
        except ConsoleError as e:
            print(f"error: {e}")
            return 1
        voice = next((v for v in session.voices if v["name"] == args.voice), None)
        if voice is None:
            raise SystemExit(f"Unknown voice: {args.voice}")
        session.select(
            voice_type=voice["voiceType"],
            language=(voice.get("languageCodes") or [""])[0],
            voice_name=voice["name"],
            text=args.text,
        )
        try:
            entry = session.generate()
        except ConsoleError as e:
            print(f"error: {e}")
            return 1

    out_path = _output_path(args.out, entry.data["audio"]["encoding"])
    out_path.write_bytes(entry.audio)
    for w in entry.warnings:
        print(f"warning: {w}")
    print(f"{out_path} ({len(entry.audio)} bytes, {entry.client_total_ms} ms, {format_usd(entry.estimated_cost_usd)})")
    return 0


_COMMANDS = {
    "serve": _cmd_serve,
    "voices": _cmd_voices,
    "pricing": _cmd_pricing,
    "estimate": _cmd_estimate,
    "synth": _cmd_synth,
    "console": _cmd_console,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Exit code (0 for success, 1 for a reported service error).
    """
    args = _parse_args(argv)

    configure_logging()
    set_request_id(str(uuid4())[:12])

    try:
        return _COMMANDS[args.command](args)
    except PlaygroundError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
