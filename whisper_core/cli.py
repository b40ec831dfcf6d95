#!/usr/bin/env python3
"""
Whisper Me Command Line Interface

Hide a message in a generated WAV file, or read one back.

Usage:
    whisper-me send [OPTIONS]
    whisper-me receive [OPTIONS]
    whisper-me capacity [OPTIONS]
    whisper-me --version
    whisper-me --help
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import WhisperConfig
from .manager import WhisperManager


class WhisperCLI:
    """Main CLI application for Whisper Me."""

    def __init__(self):
        self.config = WhisperConfig.default()
        self.manager: Optional[WhisperManager] = None

    def run(self, args: list) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        if hasattr(parsed, 'func'):
            try:
                self.configure(parsed)
                return parsed.func(parsed)
            except Exception as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        else:
            parser.print_help()
            return 0

    def configure(self, parsed) -> None:
        """Load config, apply command line overrides and set up logging."""
        if parsed.config:
            self.config = WhisperConfig.from_file(parsed.config)

        overrides = {}
        if getattr(parsed, 'duration', None) is not None:
            overrides['duration_seconds'] = parsed.duration
        if getattr(parsed, 'sample_rate', None) is not None:
            overrides['sample_rate'] = parsed.sample_rate
        if overrides:
            self.config = WhisperConfig.from_dict({**self.config.to_dict(), **overrides})

        level = logging.DEBUG if parsed.verbose else getattr(logging, self.config.log_level.upper())
        logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

        self.manager = WhisperManager(self.config)

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="whisper-me",
            description="Hide secret messages in audio",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    whisper-me send --message "Meet at noon" --seed "password123" --output note.wav
    whisper-me receive --input note.wav --seed "password123"
    whisper-me capacity --duration 8
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'Whisper Me v{__version__}'
        )
        parser.add_argument('--config', help='JSON configuration file')
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Verbose output')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_send_command(subparsers)
        self.add_receive_command(subparsers)
        self.add_capacity_command(subparsers)

        return parser

    def add_carrier_options(self, cmd) -> None:
        cmd.add_argument('--duration', '-d', type=float,
                         help='Carrier duration in seconds')
        cmd.add_argument('--sample-rate', '-r', type=int,
                         help='Carrier sample rate in Hz')

    def add_send_command(self, subparsers):
        """Add send command to parser."""
        cmd = subparsers.add_parser('send', help='Hide a message in a new WAV file')
        source = cmd.add_mutually_exclusive_group(required=True)
        source.add_argument('--message', '-m', help='Message text')
        source.add_argument('--message-file', help='Read message text from file')
        cmd.add_argument('--seed', '-s', required=True,
                         help='Shared seed (at least 8 characters)')
        cmd.add_argument('--output', '-o', help='Output WAV file')
        self.add_carrier_options(cmd)
        cmd.set_defaults(func=self.handle_send)

    def add_receive_command(self, subparsers):
        """Add receive command to parser."""
        cmd = subparsers.add_parser('receive', help='Read a message from a WAV file')
        cmd.add_argument('--input', '-i', required=True, help='WAV file')
        cmd.add_argument('--seed', '-s', required=True, help='Shared seed')
        cmd.add_argument('--output', '-o', help='Write message to file instead of stdout')
        cmd.set_defaults(func=self.handle_receive)

    def add_capacity_command(self, subparsers):
        """Add capacity command to parser."""
        cmd = subparsers.add_parser('capacity', help='Show maximum message size')
        self.add_carrier_options(cmd)
        cmd.set_defaults(func=self.handle_capacity)

    # Command handlers

    def handle_send(self, args):
        """Handle send command."""
        if args.message_file:
            message = Path(args.message_file).read_text(encoding='utf-8')
        else:
            message = args.message

        result = self.manager.send(message, args.seed)
        path = self.manager.save(result.wav_bytes, args.output)

        print(f"Hidden message written to {path}")
        print(f"Capacity used: {result.capacity_used}/{result.capacity_total} bytes")
        print(f"SHA-256: {result.checksum}")
        print("Share the seed with the recipient over a separate channel.")
        return 0

    def handle_receive(self, args):
        """Handle receive command."""
        carrier_bytes = self.manager.fetch_carrier(args.input)
        result = self.manager.receive(carrier_bytes, args.seed)

        if not result.success:
            print(result.message, file=sys.stderr)
            return 1

        if args.output:
            Path(args.output).write_text(result.message, encoding='utf-8')
            print(f"Message written to {args.output}")
        else:
            print(result.message)
        return 0

    def handle_capacity(self, args):
        """Handle capacity command."""
        capacity = self.manager.capacity()
        config = self.manager.config
        print(f"{capacity} bytes ({config.duration_seconds}s at {config.sample_rate} Hz)")
        return 0


def main():
    """Main entry point."""
    cli = WhisperCLI()
    sys.exit(cli.run(sys.argv[1:]))


if __name__ == "__main__":
    main()
