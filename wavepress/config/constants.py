from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
RESULTS_FOLDER = PROJECT_ROOT / "results"

# Quality
DEFAULT_QUALITY = 75
QUALITY_MIN = 1
QUALITY_MAX = 100
QUALITY_SWEEP = range(10, 101, 5)  # Same steps as the upload form

# Geometry
PAD_RATIO = 2  # One Haar step pairs adjacent samples
PIXEL_MIN = 0
PIXEL_MAX = 255

# Open question: not tied to the real image geometry
LOSSLESS_ROW_WIDTH = 256

# Artifact kinds and fields
LOSSY = 'lossy'
LOSSLESS = 'lossless'
WIDTH = 'width'
HEIGHT = 'height'
QUALITY = 'quality'
QUANTIZED = 'quantized'
RESIDUALS = 'residuals'

ARTIFACT_SUFFIX = '.json'
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.tif', '.gif', '.webp')

# Result tables
FILE = 'file'
ARTIFACT = 'artifact'
KIND = 'kind'
STATUS = 'status'
ARTIFACT_BYTES = 'artifact_bytes'
MAE = 'mae'
MSE = 'mse'
PSNR = 'psnr'
COMPRESSION_RATIO = 'compression_ratio'
