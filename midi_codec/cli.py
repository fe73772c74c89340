import argparse
import logging
import sys
import time

from midi_codec import ports
from midi_codec.codec import Codec
from midi_codec.config import CodecConfig, generate_default_config

LOG_LEVELS = [
    # logging.CRITICAL,
    # logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]

MONITOR_SLEEP = 0.5


logger = logging.getLogger("midi_codec")


def hex_byte(token):
    try:
        value = int(token, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex byte: {token!r}")
    if not 0 <= value <= 0xFF:
        raise argparse.ArgumentTypeError(f"byte out of range: {token!r}")
    return value


class CommandLine:
    def __init__(self, args):
        self.args = args

    def _codec(self):
        config_file = getattr(self.args, "config", None)
        if config_file is None:
            return Codec()
        return Codec.from_config(CodecConfig.from_yaml(stream=config_file))

    def print_info(self):
        print("MIDI Input Ports:")
        print("  " + "\n  ".join(ports.get_input_names()))
        print("MIDI Output Ports:")
        print("  " + "\n  ".join(ports.get_output_names()))

    def decode(self):
        data = bytes(self.args.bytes)
        try:
            message = self._codec().decode_bytes(data)
        except ValueError as e:
            raise SystemExit(f"Cannot decode {data.hex(' ')}: {e}")
        print(repr(message))

    def write_default_config(self):
        print(f"Writing to {self.args.config.name}")
        with self.args.config as stream:
            generate_default_config().to_yaml(stream=stream)

    def monitor(self):
        codec = self._codec()
        print(f"Monitoring {self.args.port} with {codec}")

        def _print_event(event):
            print(f"{event.timestamp:>10} {event.message!r}", flush=True)

        with ports.MidiInput(self.args.port, _print_event, codec=codec):
            try:
                while True:
                    time.sleep(MONITOR_SLEEP)
            except KeyboardInterrupt:
                logger.debug(f"Stopped monitoring {self.args.port}")

    def run(self):
        if self.args.cmd == 'info':
            self.print_info()
        elif self.args.cmd == 'decode':
            self.decode()
        elif self.args.cmd == 'generate-config':
            self.write_default_config()
        elif self.args.cmd == 'monitor':
            self.monitor()


def main(argv=None):
    """%(prog)s"""
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(usage=CommandLine.__init__.__doc__)
    parser.add_argument("--verbose", "-v", action="count", default=0)
    parser.set_defaults(cmd=None)
    subparsers = parser.add_subparsers()

    info_parser = subparsers.add_parser('info', help="Display midi info")
    info_parser.set_defaults(cmd='info')

    decode_parser = subparsers.add_parser('decode', help="Decode a short message given as hex bytes")
    decode_parser.set_defaults(cmd='decode')
    decode_parser.add_argument('bytes', nargs='+', metavar='HEX', type=hex_byte, help='Message bytes, e.g. 90 3c 64')
    decode_parser.add_argument('--config', '-c', metavar='FILE', type=argparse.FileType('r'), default=None, help='Config file to use')

    monitor_parser = subparsers.add_parser('monitor', help="Print decoded events from an input port")
    monitor_parser.set_defaults(cmd='monitor')
    monitor_parser.add_argument('port', help='Input port name')
    monitor_parser.add_argument('--config', '-c', metavar='FILE', type=argparse.FileType('r'), default=None, help='Config file to use')

    generate_config_parser = subparsers.add_parser('generate-config', help='Generate example config file')
    generate_config_parser.set_defaults(cmd='generate-config')
    generate_config_parser.add_argument('--config', '-c', metavar='FILE', type=argparse.FileType('w'), default='config.yaml', help='Config file to use [%(default)s]')

    args = parser.parse_args(argv)
    logging.basicConfig(level=LOG_LEVELS[min(args.verbose, len(LOG_LEVELS) - 1)])
    if args.cmd is None:
        parser.print_help()

    CommandLine(args).run()
