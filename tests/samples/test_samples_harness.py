import os
import subprocess
import sys
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
SCRIPT = os.path.join(REPO_ROOT, "kvtree.py")

TEST_DIR = os.path.dirname(__file__)

sample_files = sorted(f for f in os.listdir(TEST_DIR) if f.endswith(".kvt"))

VALID_FILES = [f for f in sample_files if f.startswith("pass")]
INVALID_FILES = [f for f in sample_files if f.startswith("fail")]

# Hard fail if sample files are missing
if not VALID_FILES:
    raise RuntimeError("No pass*.kvt files found in samples directory")
if not INVALID_FILES:
    raise RuntimeError("No fail*.kvt files found in samples directory")

def _run(path):
    return subprocess.run(
        [sys.executable, SCRIPT, path, "--color", "never"],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
    )

@pytest.mark.parametrize("filename", VALID_FILES)
def test_valid_sample_returns_0(filename):
    result = _run(os.path.join(TEST_DIR, filename))
    assert result.returncode == 0, f"Expected 0 from {filename}, got {result.returncode}: {result.stderr}"
    assert result.stdout.strip() == "OK"

@pytest.mark.parametrize("filename", INVALID_FILES)
def test_invalid_sample_returns_1(filename):
    result = _run(os.path.join(TEST_DIR, filename))
    assert result.returncode == 1, f"Expected 1 from {filename}, got {result.returncode}"
    assert result.stderr.startswith("SyntaxError: unexpected token")
