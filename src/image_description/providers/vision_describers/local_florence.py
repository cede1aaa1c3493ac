"""
Local Florence-2 vision describer (In-Process Inference)

Runs the Florence-2 vision-language model in the current process with the
"detailed caption" task. No API key or network access is needed after the
first run.

Model is automatically downloaded from HuggingFace on first use:
- Default: microsoft/Florence-2-base-ft

Requires: pip install image-description[local]
"""

import asyncio
import io
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from image_description.errors import ProviderCallError, ProviderInitError
from image_description.providers.registry import register_provider
from image_description.providers.vision import DescriptionResult, ImagePayload, VisionDescriber
from image_description.utils.model_downloader import MODEL_CONFIGS, ensure_model_downloaded

DEFAULT_FLORENCE_REPO_ID = MODEL_CONFIGS["florence2-vlm-local"]["repo_id"]
DEFAULT_FLORENCE_LOCAL_DIR = MODEL_CONFIGS["florence2-vlm-local"]["local_dir"]

DETAILED_CAPTION_TASK = "<DETAILED_CAPTION>"


@register_provider("florence2-vlm-local")
class LocalFlorenceVLM(VisionDescriber):
    """
    Local Florence-2 describer (In-Process Inference).

    Features:
    - No external service dependency
    - Automatic model download from HuggingFace
    - One-time model load, safe under concurrent initialize() calls

    The caption is returned as both title and description.

    Requirements:
        pip install image-description[local]
        # or manually: pip install transformers torch einops timm
    """

    @property
    def is_local(self) -> bool:
        """This is a local (in-process) provider"""
        return True

    @property
    def is_stateful(self) -> bool:
        """Holds the loaded model between calls"""
        return True

    def __init__(
        self,
        repo_id: str = DEFAULT_FLORENCE_REPO_ID,
        model_path: Optional[str] = None,
        models_dir: Optional[str] = None,
        device: Optional[str] = None,
        max_new_tokens: int = 256,
        name: Optional[str] = None,
    ):
        """
        Initialize Local Florence-2 describer.

        The model is not loaded here; call initialize() first.

        Args:
            repo_id: HuggingFace repository ID for auto-download
            model_path: Pre-downloaded model directory. If None, downloads
                        from HuggingFace to models/florence-2-base-ft/
            models_dir: Base directory for downloaded models
            device: Torch device ("cuda", "cpu", ...). Default: cuda if available
            max_new_tokens: Generation length limit
            name: Provider name for logging
        """
        super().__init__(name=name)

        self.repo_id = repo_id
        self.model_path = model_path
        self.models_dir = models_dir
        self.device = device
        self.max_new_tokens = max_new_tokens

        self._model = None
        self._processor = None
        self._dtype = None
        self._init_lock = asyncio.Lock()

    @classmethod
    def get_config_schema(cls) -> Dict[str, Any]:
        """Return configuration schema"""
        return {
            "repo_id": {
                "type": "string",
                "default": DEFAULT_FLORENCE_REPO_ID,
                "description": "HuggingFace repository ID for auto-download"
            },
            "model_path": {
                "type": "string",
                "default": None,
                "description": "Path to model directory. If None, auto-downloads from HuggingFace."
            },
            "models_dir": {
                "type": "string",
                "default": None,
                "description": "Base directory for downloaded models"
            },
            "device": {
                "type": "string",
                "default": None,
                "description": "Torch device (cuda/cpu/mps)"
            },
            "max_new_tokens": {
                "type": "int",
                "default": 256,
                "description": "Maximum generated tokens"
            },
        }

    @property
    def is_loaded(self) -> bool:
        return self._model is not None and self._processor is not None

    async def initialize(self) -> None:
        """
        Download (if needed) and load the Florence-2 model and processor.

        Raises:
            ProviderInitError: Dependencies missing, download or load failed
        """
        async with self._init_lock:
            if self.is_loaded:
                return

            try:
                model_dir = await asyncio.to_thread(self._resolve_model_path)
                self._model, self._processor, self.device, self._dtype = await asyncio.to_thread(
                    self._load_components, model_dir
                )
            except ImportError as e:
                self.logger.error(f"Local vision dependencies missing: {e}")
                raise ProviderInitError(
                    "transformers/torch not installed. "
                    "Install with: pip install image-description[local]"
                ) from e
            except Exception as e:
                self.logger.error(f"Failed to load Florence model: {e}")
                raise ProviderInitError(f"Failed to load Florence model: {e}") from e

            self.logger.info("Image service initialization complete")

    def _resolve_model_path(self) -> Path:
        """
        Resolve model path, downloading from HuggingFace if necessary.

        Returns:
            Path to the model directory.
        """
        if self.model_path:
            model_dir = Path(self.model_path)
            if model_dir.exists():
                return model_dir
            self.logger.warning(
                f"Model directory not found at {self.model_path}, "
                f"will download from HuggingFace: {self.repo_id}"
            )

        self.logger.info("Downloading Florence model...")
        return Path(
            ensure_model_downloaded(
                repo_id=self.repo_id,
                local_dir=DEFAULT_FLORENCE_LOCAL_DIR if self.repo_id == DEFAULT_FLORENCE_REPO_ID else None,
                models_dir=self.models_dir,
            )
        )

    def _load_components(self, model_dir: Path) -> Tuple[Any, Any, str, Any]:
        """Load processor (with tokenizer) and model; runs in a worker thread"""
        import torch
        from transformers import AutoModelForCausalLM, AutoProcessor

        device = self.device or ("cuda" if torch.cuda.is_available() else "cpu")
        dtype = torch.float16 if device.startswith("cuda") else torch.float32

        self.logger.info("Loading processor and tokenizer...")
        processor = AutoProcessor.from_pretrained(str(model_dir), trust_remote_code=True)

        self.logger.info(f"Loading Florence model on {device}...")
        model = AutoModelForCausalLM.from_pretrained(
            str(model_dir),
            torch_dtype=dtype,
            trust_remote_code=True,
        ).to(device)
        model.eval()

        return model, processor, device, dtype

    def _generate_caption(self, data: bytes) -> str:
        """Run detailed-caption inference; runs in a worker thread"""
        from PIL import Image

        with Image.open(io.BytesIO(data)) as img:
            image = img.convert("RGB")

        inputs = self._processor(
            text=DETAILED_CAPTION_TASK,
            images=image,
            return_tensors="pt",
        ).to(self.device, self._dtype)

        generated_ids = self._model.generate(
            input_ids=inputs["input_ids"],
            pixel_values=inputs["pixel_values"],
            max_new_tokens=self.max_new_tokens,
            num_beams=3,
            do_sample=False,
        )
        generated_text = self._processor.batch_decode(generated_ids, skip_special_tokens=False)[0]

        result = self._processor.post_process_generation(
            generated_text,
            task=DETAILED_CAPTION_TASK,
            image_size=(image.width, image.height),
        )
        return str(result[DETAILED_CAPTION_TASK]).strip()

    async def describe_image(self, payload: ImagePayload) -> DescriptionResult:
        """
        Caption the image with the local model.

        Returns:
            The detailed caption as both title and description
        """
        if not self.is_loaded:
            raise ProviderCallError("Model components not initialized", provider=self.name)

        self.logger.debug("Generating image description")
        try:
            caption = await asyncio.to_thread(self._generate_caption, payload.data)
        except Exception as e:
            self.logger.error(f"Local inference failed: {e}")
            raise ProviderCallError(f"Local inference failed: {e}", provider=self.name) from e

        return DescriptionResult(title=caption, description=caption)

    async def cleanup(self) -> None:
        """Release model references"""
        self._model = None
        self._processor = None
        self.logger.info("Florence model released")
