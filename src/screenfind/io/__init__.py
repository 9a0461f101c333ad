"""IO package: collaborators that supply image buffers.

- assets: named PNG assets and raster decoding
- capture: live screen capture (mss)
"""
from .assets import AssetStore, decode_image, load_image

__all__ = ["AssetStore", "decode_image", "load_image"]
