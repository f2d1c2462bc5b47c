"""
Fatal level tests in a child process (real termination)
"""

import os
import subprocess
import sys
import textwrap
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def run_child(code: str, cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [str(ROOT), env.get('PYTHONPATH', '')]))
    return subprocess.run(
        [sys.executable, '-c', textwrap.dedent(code)],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        timeout=60
    )


def test_fatal_instance_exits_nonzero_after_writing(tmp_path):
    result = run_child("""
        import rotlog
        log = rotlog.open_log('path=. name=app stderr=true')
        log.info('before')
        log.fatal('unrecoverable')
        print('not reached')
    """, tmp_path)

    assert result.returncode == 1
    assert 'not reached' not in result.stdout
    assert result.stderr.rstrip().endswith('|fatal| unrecoverable')

    files = list(tmp_path.glob('app-*.log'))
    assert len(files) == 1
    lines = files[0].read_text(encoding='utf-8').splitlines()
    assert lines[0].endswith('|info | before')
    assert lines[1].endswith('|fatal| unrecoverable')


def test_fatal_without_logger_exits_nonzero(tmp_path):
    result = run_child("""
        import rotlog
        rotlog.info('ignored')
        rotlog.fatalf('no logger %s', 'installed')
        print('not reached')
    """, tmp_path)

    assert result.returncode == 1
    assert 'not reached' not in result.stdout


def test_fatal_from_worker_thread_ends_process(tmp_path):
    result = run_child("""
        import threading, time
        import rotlog
        rotlog.open_log('stdout=true')
        threading.Thread(target=rotlog.fatal, args=('from thread',)).start()
        time.sleep(30)
        print('not reached')
    """, tmp_path)

    assert result.returncode == 1
    assert result.stdout.rstrip().endswith('|fatal| from thread')
    assert 'not reached' not in result.stdout
