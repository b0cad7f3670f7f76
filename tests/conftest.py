import os
import pytest
from pathlib import Path
import tempfile
import shutil
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

# keep history.log out of the home directory during tests
os.environ.setdefault("INFER_MCP_DATA_DIR", tempfile.mkdtemp())

from infer_mcp.infrastructure.resources import create_project_manifest


@pytest.fixture(scope="session")
def session_workdir():
    d = Path(tempfile.mkdtemp())
    create_project_manifest(d, "test")
    try:
        yield d
    finally:
        shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def manifest_path(session_workdir, request):
    """Fresh project manifest in a test-specific subdirectory."""
    test_dir = session_workdir / request.node.name
    test_dir.mkdir(exist_ok=True)
    create_project_manifest(str(test_dir), "test")
    return str(test_dir / "test_manifest.json")
