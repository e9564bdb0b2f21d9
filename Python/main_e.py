# Bradford Arrington 2025
import sys
from bitio import CompressorBitio
from huff import COMPRESSION_NAME, FormatError, expand_file
from main_c import track_performance, usage, parse_debug


def main(argv=None) -> int:
    arguments = sys.argv if argv is None else argv
    if len(arguments) < 3:
        usage(arguments[0])
        return 0

    debug = parse_debug(arguments[3:])
    try:
        input_file = CompressorBitio.BitFile.open_input_bit_file(arguments[1], pacifier=True)
        with input_file, open(arguments[2], 'wb') as output_file:
            print(f"\nDecompressing {arguments[1]} to {arguments[2]}")
            print(f"Using {COMPRESSION_NAME}\n")

            track_performance("ExpandFile", expand_file, input_file, output_file, debug)
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        return 1
    except FormatError as e:
        print(f"Bad compressed file: {e}")
        return 1
    except Exception as e:
        print(f"An error occurred: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
