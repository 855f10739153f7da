from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from src.core.errors import ImageDecodeFailure


def decode_image(image_bytes: bytes | None) -> Image.Image:
	"""Decode raw capture bytes into an RGB PIL image or raise ImageDecodeFailure."""
	if not image_bytes:
		raise ImageDecodeFailure("Empty image payload")
	try:
		img = Image.open(io.BytesIO(image_bytes))
		img.load()
	except (UnidentifiedImageError, OSError, EOFError, SyntaxError, ValueError) as e:
		raise ImageDecodeFailure(f"Could not decode image: {e}") from e
	return img.convert("RGB")


def image_to_png_bytes(img: Image.Image) -> bytes:
	buf = io.BytesIO()
	img.save(buf, format="PNG")
	return buf.getvalue()
