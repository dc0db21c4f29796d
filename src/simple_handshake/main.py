"""Command-line entry point: encode, decode and exchange handshake frames."""

import argparse
import asyncio
import logging
import sys

from simple_handshake import __version__
from simple_handshake.core.config import Settings, XorKeys, load_xor_keys, setup_logging
from simple_handshake.exceptions import HandshakeError
from simple_handshake.protocol.frames import Frame
from simple_handshake.serial.channel import HandshakeChannel
from simple_handshake.serial.connection import SerialConnection

logger = logging.getLogger(__name__)


def format_body(body: bytes) -> str:
    """Hex dump of a body, with its text form when it decodes as UTF-8."""
    if not body:
        return ""
    text = body.hex(" ")
    try:
        decoded = body.decode("utf-8")
    except UnicodeDecodeError:
        return text
    if decoded.isprintable():
        return f"{text}  {decoded!r}"
    return text


def print_frame(frame: Frame) -> None:
    print(f"XOR1: 0x{frame.xor1:02X}")
    print(f"XOR2: 0x{frame.xor2:02X}")
    print(f"Body ({len(frame.body)} bytes): {format_body(frame.body)}")


def _parse_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}") from None


def _parse_key(value: str) -> int:
    try:
        key = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if not 0 <= key <= 0xFF:
        raise argparse.ArgumentTypeError(f"key must be 0-255, got {key}")
    return key


def _payload(args: argparse.Namespace) -> bytes:
    if args.text is not None:
        return args.text.encode("utf-8")
    return args.hex


def _resolve_keys(args: argparse.Namespace, settings: Settings) -> XorKeys:
    """Keys from --xor1/--xor2 when both are given, otherwise from the key file."""
    if args.xor1 is not None and args.xor2 is not None:
        return XorKeys(xor1=args.xor1, xor2=args.xor2)
    if args.xor1 is not None or args.xor2 is not None:
        raise HandshakeError("--xor1 and --xor2 must be given together")
    return load_xor_keys(args.keys or settings.keys_path)


def _add_payload_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--hex", type=_parse_hex, help="Payload as a hex string")
    group.add_argument("--text", help="Payload as UTF-8 text")


def _add_key_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--keys", help="JSON key file with XOR1 and XOR2 (default: HANDSHAKE_KEYS_FILE)")
    parser.add_argument("--xor1", type=_parse_key, help="First key byte, overrides the key file")
    parser.add_argument("--xor2", type=_parse_key, help="Second key byte, overrides the key file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simple-handshake", description="Handshake frame tool")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Log level (default: HANDSHAKE_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Wrap a payload in a frame and print it as hex")
    _add_payload_args(encode_parser)
    _add_key_args(encode_parser)

    decode_parser = subparsers.add_parser("decode", help="Decode a hex frame")
    decode_parser.add_argument("frame", type=_parse_hex, help="Frame as a hex string")
    decode_parser.add_argument("--verify", action="store_true", help="Check the frame CRC")

    exchange_parser = subparsers.add_parser("exchange", help="Send a frame over serial and print the reply")
    _add_payload_args(exchange_parser)
    _add_key_args(exchange_parser)
    exchange_parser.add_argument("--port", help="Serial port (default: HANDSHAKE_SERIAL_PORT)")
    exchange_parser.add_argument("--baud", type=int, help="Baud rate (default: HANDSHAKE_SERIAL_BAUD)")
    exchange_parser.add_argument("--timeout", type=float, help="Seconds to wait for the reply")
    exchange_parser.add_argument("--verify", action="store_true", help="Check the reply CRC")

    return parser


def cmd_encode(args: argparse.Namespace, settings: Settings) -> int:
    keys = _resolve_keys(args, settings)
    frame = Frame(body=_payload(args), xor1=keys.xor1, xor2=keys.xor2)
    print(frame.to_bytes().hex())
    return 0


def cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    print_frame(Frame.from_bytes(args.frame, verify=args.verify))
    return 0


async def run_exchange(args: argparse.Namespace, settings: Settings) -> Frame:
    keys = _resolve_keys(args, settings)
    connection = SerialConnection(
        port=args.port if args.port is not None else settings.serial_port,
        baudrate=args.baud if args.baud is not None else settings.serial_baud,
        timeout=settings.serial_timeout,
    )
    async with connection:
        channel = HandshakeChannel(
            connection,
            keys,
            response_timeout=args.timeout if args.timeout is not None else settings.response_timeout,
            verify=args.verify,
        )
        reply = await channel.exchange(_payload(args))
        logger.info("Exchange complete: %s", channel.stats)
        return reply


def cmd_exchange(args: argparse.Namespace, settings: Settings) -> int:
    print_frame(asyncio.run(run_exchange(args, settings)))
    return 0


COMMANDS = {
    "encode": cmd_encode,
    "decode": cmd_decode,
    "exchange": cmd_exchange,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(args.log_level or settings.log_level)

    try:
        return COMMANDS[args.command](args, settings)
    except (HandshakeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
