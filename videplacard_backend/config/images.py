"""Bounds applied to scan uploads before they are forwarded to the model."""

# Longest edge, in pixels, after proportional scaling.
IMAGE_MAX_DIMENSION = 1024

IMAGE_JPEG_QUALITY = 80
