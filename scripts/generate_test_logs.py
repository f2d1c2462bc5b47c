"""
Generate Test Logs for Rotation Verification

Writes a number of log lines, optionally from several threads at once, to
check rotation, retention and line integrity by hand.

Usage:
    python -m scripts.generate_test_logs --lines 5000 --threads 50
    python -m scripts.generate_test_logs --period minute --duration 180
"""

import argparse
import sys
import threading
import time
from pathlib import Path
from typing import Dict

sys.path.insert(0, str(Path(__file__).parent.parent))
from rotlog import RotatingLog, parse_options


def generate_test_logs(
    log: RotatingLog,
    lines: int = 5000,
    threads: int = 1,
    duration_sec: float = 0.0
) -> Dict[str, int]:
    """
    Generate test log lines.

    Args:
        log: Target RotatingLog
        lines: Total number of lines to write
        threads: Number of concurrent writer threads
        duration_sec: Spread the lines over this many seconds (0 = as fast as possible)

    Returns:
        Dict with lines_written and threads
    """
    threads = max(1, threads)
    per_thread = lines // threads
    extra = lines % threads
    delay = duration_sec / per_thread if duration_sec and per_thread else 0.0

    def worker(worker_id: int, count: int):
        for i in range(count):
            log.infof("worker=%d line=%d/%d test message for rotation testing", worker_id, i + 1, count)
            if delay:
                time.sleep(delay)

    workers = [
        threading.Thread(target=worker, args=(n, per_thread + (1 if n < extra else 0)))
        for n in range(threads)
    ]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    return {'lines_written': lines, 'threads': threads}


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Generate test logs for rotation verification")
    parser.add_argument("--path", default="logs", help="Log directory (default: logs)")
    parser.add_argument("--name", default="test", help="Log base name (default: test)")
    parser.add_argument("--period", default="minute", choices=['minute', 'hour', 'day', 'month'])
    parser.add_argument("--keep", type=int, default=3, help="Periods to retain (default: 3)")
    parser.add_argument("--lines", type=int, default=5000, help="Lines to write (default: 5000)")
    parser.add_argument("--threads", type=int, default=1, help="Writer threads (default: 1)")
    parser.add_argument("--duration", type=float, default=0.0, help="Seconds to spread writes over")

    args = parser.parse_args()

    config = parse_options(
        f'path="{args.path}" name="{args.name}" period={args.period} keep={args.keep} global=false'
    )
    with RotatingLog(config) as log:
        stats = generate_test_logs(log, args.lines, args.threads, args.duration)
        print(f"✓ Wrote {stats['lines_written']:,} lines from {stats['threads']} thread(s)")
        print(f"✓ Current file: {log.current_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
