import os
from pathlib import Path


# You can set your custom data directory by running (change path to desired location): export INFER_MCP_DATA_DIR="~/user/infer_mcp_data"
# If not set, defaults to ~/.infer_mcp/

def get_data_root() -> Path:
    # Allow user to override via environment variable
    custom = os.getenv("INFER_MCP_DATA_DIR")
    if custom:
        root = Path(custom).expanduser()
    else:
        # Default: ~/.infer_mcp/
        root = Path.home() / ".infer_mcp"

    root.mkdir(parents=True, exist_ok=True)
    return root

DATA_ROOT = get_data_root()
LOG_PATH = DATA_ROOT / "history.log"
