#
# trcalc.py -- transformation calculations for a zoomable image view
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
Bounds arithmetic for a scaled and translated image inside a viewport.

All coordinates are in view-local layout units.  The transform is
applied about the center of the viewport: a scale of 1 with zero
translation shows the image at its rendered (letterboxed) size,
centered.  Translation moves the scaled image, so the largest legal
translation along an axis is half of the amount by which the scaled
image overflows the viewport.

These functions are total: non-positive sizes give zero sizes and zero
bounds rather than errors, and no division by zero is possible.
"""
from collections import namedtuple

import numpy as np

Size = namedtuple('Size', ['width', 'height'])
Transform = namedtuple('Transform', ['scale', 'translate_x', 'translate_y'])

identity = Transform(1.0, 0.0, 0.0)

aspect_modes = ('fit', 'fill', 'stretch')


class TransformError(Exception):
    pass


def _is_positive(size):
    return (size is not None and
            size[0] is not None and size[1] is not None and
            size[0] > 0 and size[1] > 0)


def get_aspect_source(viewport, intrinsic, override=None):
    """Pick the size whose aspect ratio governs the rendered size.

    The explicit `override` wins when both of its dimensions are
    positive, then the `intrinsic` size of the image.  With neither
    available the viewport itself is used, i.e. the image is assumed
    to fill the view exactly.
    """
    if _is_positive(override):
        return Size(*override[:2])
    if _is_positive(intrinsic):
        return Size(*intrinsic[:2])
    return Size(*viewport[:2])


def get_rendered_size(viewport, intrinsic, override=None, aspect='fit'):
    """Calculate the size of the image as displayed at scale 1.

    Parameters
    ----------
    viewport : tuple of (width, height)
        Size of the view.

    intrinsic : tuple of (width, height) or None
        Natural size of the image; zero or None if not known.

    override : tuple of (width, height) or None
        Explicitly requested image size, takes precedence over
        `intrinsic` if both dimensions are positive.

    aspect : str
        One of `aspect_modes`.

    Returns
    -------
    size : `Size`
        The rendered size, or (0, 0) if the viewport has no area.

    """
    if aspect not in aspect_modes:
        raise TransformError("Invalid aspect mode '%s'" % (aspect))

    if not _is_positive(viewport):
        return Size(0.0, 0.0)

    view_wd, view_ht = float(viewport[0]), float(viewport[1])
    if aspect == 'stretch':
        return Size(view_wd, view_ht)

    src_wd, src_ht = get_aspect_source(viewport, intrinsic,
                                       override=override)
    image_aspect = float(src_wd) / float(src_ht)
    view_aspect = view_wd / view_ht

    width_constrained = image_aspect > view_aspect
    if aspect == 'fill':
        # covering the view is the transpose of fitting into it
        width_constrained = not width_constrained

    if width_constrained:
        return Size(view_wd, view_wd / image_aspect)
    return Size(view_ht * image_aspect, view_ht)


def get_max_translation(rendered, scale, viewport):
    """Return (max_x, max_y), the largest translation magnitudes that
    keep the image at `scale` from revealing empty space on an axis
    where it overflows the viewport.  An axis where the scaled image
    fits inside the viewport gets 0, and so does every axis when either
    size has no area.
    """
    if not (_is_positive(viewport) and _is_positive(rendered)):
        return (0.0, 0.0)
    scaled_wd = rendered[0] * scale
    scaled_ht = rendered[1] * scale
    max_x = max(0.0, (scaled_wd - viewport[0]) / 2.0)
    max_y = max(0.0, (scaled_ht - viewport[1]) / 2.0)
    return (max_x, max_y)


def clamp_translation(x, y, max_x, max_y):
    # an axis with no slack is pinned to 0.0, never -0.0
    x = float(np.clip(x, -max_x, max_x)) if max_x > 0 else 0.0
    y = float(np.clip(y, -max_y, max_y)) if max_y > 0 else 0.0
    return (x, y)


def clamp_scale(scale, min_scale, max_scale):
    return float(np.clip(scale, min_scale, max_scale))


def clamp_transform(transform, rendered, viewport):
    """Return `transform` with its translation clamped to the legal
    range for its own scale.
    """
    scale, x, y = transform
    max_x, max_y = get_max_translation(rendered, scale, viewport)
    x, y = clamp_translation(x, y, max_x, max_y)
    return Transform(scale, x, y)


def get_fill_scale(rendered, viewport):
    """Return the smallest uniform scale at which the rendered image
    covers the viewport on both axes (i.e. no letterboxing remains).
    """
    if not _is_positive(rendered):
        return 1.0
    return max(viewport[0] / float(rendered[0]),
               viewport[1] / float(rendered[1]))


def get_tap_zoom_target(tap, viewport, rendered, zoom_level=2.5,
                        max_scale=None, max_fill_scale=None):
    """Calculate the transform for zooming in on a tapped point.

    The scale is the larger of `zoom_level` (limited to `max_scale`) and
    the fill scale (limited to `max_fill_scale`), so the zoom removes any
    letterbox bars unless that would take more than `max_fill_scale`.
    The translation moves the tapped point toward the center of the view
    by its offset times the scale, then is clamped to the legal range
    for the new scale.

    Parameters
    ----------
    tap : tuple of (x, y)
        Tap position in view-local coordinates.

    viewport, rendered : tuple of (width, height)
        Size of the view and the rendered image size at scale 1.

    zoom_level : float
        Baseline zoom scale.

    max_scale : float or None
        Ceiling for `zoom_level`.

    max_fill_scale : float or None
        Ceiling for the fill scale; may be larger than `max_scale`.

    Returns
    -------
    transform : `Transform`
        The target transform.

    """
    scale = zoom_level
    if max_scale is not None:
        scale = min(scale, max_scale)
    fill_scale = get_fill_scale(rendered, viewport)
    if max_fill_scale is not None:
        fill_scale = min(fill_scale, max_fill_scale)
    scale = max(scale, fill_scale)

    ctr_x, ctr_y = viewport[0] / 2.0, viewport[1] / 2.0
    max_x, max_y = get_max_translation(rendered, scale, viewport)
    x, y = clamp_translation((ctr_x - tap[0]) * scale,
                             (ctr_y - tap[1]) * scale, max_x, max_y)
    return Transform(scale, x, y)

# END
