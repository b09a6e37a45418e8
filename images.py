import os

from PIL import Image

from errors import ConfigurationError
from settings import IMAGES_DIR, IMAGE_EXTENSIONS

def list_image_files(folder=IMAGES_DIR):
    if not os.path.isdir(folder):
        return []
    return sorted(f for f in os.listdir(folder) if f.lower().endswith(IMAGE_EXTENSIONS))

def read_image_info(path):
    """Return the image record for a file; only the header is read."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ConfigurationError(f"Could not read image {path}: {e}") from e
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Image {path} has degenerate size {width}x{height}")
    return {"name": os.path.basename(path), "path": path, "width": width, "height": height}

def load_image_list(folder=IMAGES_DIR):
    files = list_image_files(folder)
    if not files:
        raise ConfigurationError(f"No images found in '{folder}' folder. Please add some images and restart.")
    image_list = [read_image_info(os.path.join(folder, f)) for f in files]
    print(f"Loaded {len(image_list)} images from {folder}")
    return image_list
