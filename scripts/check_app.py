import os
import pathlib
import sys


def ensure_settings() -> None:
    """Seed the BS_* environment variables with local placeholders."""
    os.environ.setdefault("BS_BRAND_STORE_URL", "http://localhost:3000/api/brand")
    os.environ.setdefault("BS_RENDER_SERVICE_URL", "http://localhost:3000/api/render-pdf")


def ensure_project_path() -> None:
    """Make sure the project root is on sys.path for local module imports."""
    project_root = pathlib.Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


if __name__ == "__main__":
    ensure_settings()
    ensure_project_path()

    from brandsync.asset_html import registered_keys  # noqa: E402
    from brandsync.main import app  # noqa: E402

    print("FastAPI app imported successfully with", len(app.routes), "routes.")
    print("Registered templates:", ", ".join(registered_keys()))
