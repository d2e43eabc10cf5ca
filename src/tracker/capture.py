"""
Snapshot the binder transaction table so it can be resolved later.

Either from the local kernel (when running on the device itself) or from
an attached device over adb.
"""

import logging
import shutil
import subprocess
from typing import List, Optional

from tracker.binder_tracker import DEFAULT_TRANSACTION_FILE, TRANSACTION_FILES
from tracker.errors import SourceUnavailable

ADB_TIMEOUT_SECONDS = 10


def capture_local(output_path: str, source: Optional[str] = None) -> str:
    candidates = (source,) if source else TRANSACTION_FILES
    for path in candidates:
        try:
            shutil.copyfile(path, output_path)
        except OSError as e:
            logging.warning("Could not copy %s: %s", path, e)
            continue
        logging.info("Captured %s to %s", path, output_path)
        return path
    raise SourceUnavailable(", ".join(candidates), "no readable transaction file")


def adb_command(source: str, serial: Optional[str] = None) -> List[str]:
    adb = shutil.which("adb") or "adb"
    command = [adb]
    if serial:
        command += ["-s", serial]
    return command + ["shell", "cat", source]


def capture_device(output_path: str, serial: Optional[str] = None,
                   source: str = DEFAULT_TRANSACTION_FILE) -> str:
    command = adb_command(source, serial)
    try:
        result = subprocess.run(command, capture_output=True, text=True, timeout=ADB_TIMEOUT_SECONDS)
    except FileNotFoundError:
        raise SourceUnavailable(source, "adb not found, install Android Platform Tools and add to PATH")
    except subprocess.TimeoutExpired:
        raise SourceUnavailable(source, "adb shell command timed out")

    if result.returncode != 0 and result.stderr.strip():
        raise SourceUnavailable(source, f"adb shell error: {result.stderr.strip()}")

    with open(output_path, 'w') as file:
        file.write(result.stdout)

    logging.info("Captured %s from %s to %s", source, serial or "default device", output_path)
    return source
