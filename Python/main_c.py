# Bradford Arrington 2025
import sys
import os
import time
import tracemalloc
import psutil
from bitio import CompressorBitio
from huff import COMPRESSION_NAME, USAGE, DEBUG_HIGH, compress_file

_printed_header = False


def file_size(file_name: str) -> int:
    try:
        file_info = os.stat(file_name)
        return file_info.st_size
    except FileNotFoundError:
        return 0


def print_ratios(input_file_path: str, output_file_path: str):
    input_size = file_size(input_file_path)
    if input_size == 0:
        input_size = 1

    output_size = file_size(output_file_path)
    ratio = 100 - int((output_size * 100) / input_size)

    print(f"\nInput bytes:             {input_size}")
    print(f"Output bytes:            {output_size}")
    print(f"Compression ratio:       {ratio}%")


def track_performance(name, func, *args, **kwargs):
    global _printed_header

    process = psutil.Process(os.getpid())
    start_time = time.time()
    start_cpu = process.cpu_times().user
    tracemalloc.start()
    start_mem = tracemalloc.get_traced_memory()[0]

    try:
        result = func(*args, **kwargs)
        end_mem = tracemalloc.get_traced_memory()[1]
    finally:
        tracemalloc.stop()
    end_cpu = process.cpu_times().user
    end_time = time.time()

    wall_time_ms = (end_time - start_time) * 1000
    cpu_time_ms = (end_cpu - start_cpu) * 1000
    mem_used_kb = (end_mem - start_mem) / 1024

    if not _printed_header:
        print(f"{'Function':<20} {'Wall Time (ms)':>15} {'CPU Time (ms)':>15} {'Memory Used (KB)':>20}")
        _printed_header = True

    print(f"{name:<20} {wall_time_ms:15.2f} {cpu_time_ms:15.2f} {mem_used_kb:20.2f}")

    return result


def usage(prog_name: str):
    short_name = os.path.splitext(os.path.basename(prog_name))[0]
    print(f"\nUsage:  {short_name} {USAGE}")


def parse_debug(remaining_args: list[str]) -> int:
    debug = 0
    for arg in remaining_args:
        if arg == "-d":
            debug = DEBUG_HIGH
        else:
            print(f"Unused argument: {arg}")
    return debug


def main(argv=None) -> int:
    arguments = sys.argv if argv is None else argv
    if len(arguments) < 3:
        usage(arguments[0])
        return 0

    debug = parse_debug(arguments[3:])
    try:
        with open(arguments[1], 'rb') as input_file:
            output = track_performance("OpenBitFile", CompressorBitio.BitFile.open_output_bit_file,
                                       arguments[2], pacifier=True)
            with output:
                track_performance("CompressFile", compress_file, input_file, output, debug)
        print(f"\nCompressing {arguments[1]} to {arguments[2]}")
        print(f"Using {COMPRESSION_NAME}\n")
        print_ratios(arguments[1], arguments[2])
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        return 1
    except Exception as e:
        print(f"An error occurred: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
