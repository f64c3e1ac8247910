#
# easing.py -- Easing curves for animated transforms
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
Curves for mapping normalized animation time to normalized progress.

NOTE:
  An easing function takes a time `t` in [0, 1] and returns a progress
  value, where 0 means "at the start value" and 1 means "at the end
  value".  Every curve here returns exactly 0 at t=0 and (to within
  floating point error) 1 at t=1, but the output is NOT guaranteed to
  stay in [0, 1] or to be monotonic: the spring curves overshoot the end
  value and oscillate before settling.  Callers interpolate with
  `interpolate()` and must expect transient overshoot.

"""
import math


class EasingError(Exception):
    pass


def linear(t):
    return t


def cubic_in(t):
    return t * t * t


def cubic_out(t):
    t = t - 1.0
    return t * t * t + 1.0


def cubic_in_out(t):
    if t < 0.5:
        return 4.0 * t * t * t
    return (t - 1.0) * (2.0 * t - 2.0) * (2.0 * t - 2.0) + 1.0


def sin_in(t):
    return 1.0 - math.cos(t * math.pi / 2.0)


def sin_out(t):
    return math.sin(t * math.pi / 2.0)


def sin_in_out(t):
    return -math.cos(math.pi * t) / 2.0 + 0.5


def bounce_out(t):
    if t < 1 / 2.75:
        return 7.5625 * t * t
    elif t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    elif t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def bounce_in(t):
    return 1.0 - bounce_out(1.0 - t)


# overshoot amount of the "back" style spring curves
_back_overshoot = 1.70158


def spring_in(t):
    return t * t * ((_back_overshoot + 1.0) * t - _back_overshoot)


def spring_out(t):
    t = t - 1.0
    return t * t * ((_back_overshoot + 1.0) * t + _back_overshoot) + 1.0


def spring(t):
    """Damped sine spring.

    Starts at 0, overshoots 1 within the first third of the curve and
    rings down with an exponentially decaying amplitude.
    """
    return (math.sin(-13.0 * math.pi / 2.0 * (t + 1.0)) *
            math.pow(2.0, -10.0 * t) + 1.0)


def interpolate(start, end, easing, t):
    """Return the value between `start` and `end` at time `t` along
    the curve `easing`.
    """
    return start + (end - start) * easing(t)


easings = {
    'linear': linear,
    'cubic_in': cubic_in,
    'cubic_out': cubic_out,
    'cubic_in_out': cubic_in_out,
    'sin_in': sin_in,
    'sin_out': sin_out,
    'sin_in_out': sin_in_out,
    'bounce_in': bounce_in,
    'bounce_out': bounce_out,
    'spring_in': spring_in,
    'spring_out': spring_out,
    'spring': spring,
}


def add_easing(name, easing_fn):
    global easings
    easings[name.lower()] = easing_fn


def get_easing_names():
    return list(easings.keys())


def get_easing(name):
    if callable(name):
        return name
    if name not in easings:
        raise EasingError("Invalid easing '%s'" % (name))
    return easings[name]

# END
