"""
Model downloader utility for automatic model downloading from HuggingFace.

The local vision provider downloads its weights on first use:
- Florence-2: microsoft/Florence-2-base-ft (detailed caption task)
"""

import io
from pathlib import Path
from typing import Optional
from loguru import logger
from tqdm.auto import tqdm


# Default model configurations
MODEL_CONFIGS = {
    "florence2-vlm-local": {
        "repo_id": "microsoft/Florence-2-base-ft",
        "local_dir": "florence-2-base-ft",
        "description": "Florence-2 base vision-language model (fine-tuned)",
    },
}

PROGRESS_BAR_WIDTH = 20


def format_progress(percent: float) -> str:
    """
    Render a download percentage as a fixed-width text bar.

    Example:
        >>> format_progress(50.0)
        '[..........          ] 50.0%'
    """
    percent = max(0.0, min(100.0, percent))
    dots = "." * int(percent // (100 / PROGRESS_BAR_WIDTH))
    return f"[{dots.ljust(PROGRESS_BAR_WIDTH)}] {percent:.1f}%"


class LoggingProgressBar(tqdm):
    """
    tqdm progress bar that reports through loguru instead of the terminal.

    Logs at most once per 5% step so long downloads stay readable in log files.
    """

    def __init__(self, *args, **kwargs):
        kwargs["file"] = io.StringIO()
        super().__init__(*args, **kwargs)
        self._last_logged = -5.0

    def update(self, n=1):
        displayed = super().update(n)
        if self.total:
            percent = self.n / self.total * 100
            if percent - self._last_logged >= 5 or self.n >= self.total:
                self._last_logged = percent
                logger.info(f"{self.desc or 'Downloading model'}: {format_progress(percent)}")
        return displayed


def get_project_root() -> Path:
    """
    Get the project root directory.

    Searches upward from cwd for a directory containing pyproject.toml or .git.

    Returns:
        Path to project root, or cwd if not found.
    """
    cwd = Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return cwd


def resolve_model_dir(
    repo_id: str,
    local_dir: Optional[str] = None,
    models_dir: Optional[str] = None,
) -> Path:
    """
    Compute where a model snapshot lives on disk.

    Args:
        repo_id: HuggingFace repository ID
        local_dir: Directory name under models_dir (default: repo name)
        models_dir: Base models directory (default: <project root>/models)
    """
    base_models_dir = Path(models_dir) if models_dir else get_project_root() / "models"
    return base_models_dir / (local_dir or repo_id.split("/")[-1])


def ensure_model_downloaded(
    repo_id: str,
    local_dir: Optional[str] = None,
    models_dir: Optional[str] = None,
    show_progress: bool = True,
) -> str:
    """
    Ensure a model is downloaded from HuggingFace.

    If the model already exists locally, returns the local path.
    Otherwise downloads from HuggingFace Hub.

    Args:
        repo_id: HuggingFace repository ID (e.g., "microsoft/Florence-2-base-ft")
        local_dir: Optional local directory name (relative to models_dir).
                   If None, uses the repo name as directory.
        models_dir: Optional base models directory path.
                    If None, uses "models/" in project root.
        show_progress: Log download progress through loguru

    Returns:
        Absolute path to the downloaded model directory.

    Raises:
        Exception: If download fails.
    """
    from huggingface_hub import snapshot_download

    model_dir = resolve_model_dir(repo_id, local_dir, models_dir)

    if model_dir.exists() and any(model_dir.iterdir()):
        logger.info(f"Model already exists at: {model_dir}")
        return str(model_dir)

    model_dir.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading model from HuggingFace: {repo_id}")
    logger.info(f"Target directory: {model_dir}")

    try:
        downloaded_path = snapshot_download(
            repo_id=repo_id,
            local_dir=str(model_dir),
            tqdm_class=LoggingProgressBar if show_progress else None,
        )
        logger.info(f"Model downloaded successfully to: {downloaded_path}")
        return downloaded_path

    except Exception as e:
        logger.error(f"Failed to download model {repo_id}: {e}")
        raise


def download_vision_model(
    repo_id: str = MODEL_CONFIGS["florence2-vlm-local"]["repo_id"],
    local_dir: str = MODEL_CONFIGS["florence2-vlm-local"]["local_dir"],
    models_dir: Optional[str] = None,
) -> str:
    """
    Download the Florence-2 model used by the local vision provider.

    Args:
        repo_id: HuggingFace repository ID for the model.
        local_dir: Local directory name under models/.
        models_dir: Optional base models directory path.

    Returns:
        Path to the downloaded model directory.
    """
    return ensure_model_downloaded(
        repo_id=repo_id,
        local_dir=local_dir,
        models_dir=models_dir,
    )
