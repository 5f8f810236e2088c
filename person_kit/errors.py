from __future__ import annotations


class PersonKitError(Exception):
    """Base class for errors raised by person_kit."""


class ImageLoadError(PersonKitError, OSError):
    """An image path could not be read or decoded."""


class InvalidImageError(PersonKitError, ValueError):
    """The image handed to the preprocessor is empty or has the wrong layout."""


class MalformedTensorError(PersonKitError, ValueError):
    """
    The inference output does not match the `(4 + num_classes, num_candidates)` contract.

    Usually means the model and the decoder were configured for different exports.
    """
