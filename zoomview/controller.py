#
# controller.py -- pinch, pan and double tap handling for an image view
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
The ZoomPanController turns gesture events into a clamped
scale/translation transform for an image shown in a viewport.

Live gestures (pinch, pan) write the transform immediately.  A double
tap or a reset animates toward a target through the
`~zoomview.animation.AnimationScheduler`, which the host ticks once per
display refresh; those operations return a
`~zoomview.misc.Future.Future` that resolves to True when the animation
completes or False if it was canceled.

Every write goes through `_set_transform`, which clamps the translation
to the legal range for the scale being written, so the image never
reveals empty space where it overflows the viewport.

All methods must be called from the host's UI thread.
"""
import logging
from functools import partial

import numpy as np

from zoomview.misc import Callback, Settings
from zoomview.misc.Future import Future, resolved
from zoomview import trcalc, easing
from zoomview.trcalc import Size, Transform
from zoomview.animation import AnimationScheduler, Animation, Tween, Driver
from zoomview.events import gesture_states

__all__ = ['ZoomPanController', 'ControllerError', 'PinchSession',
           'PanSession']

default_settings = dict(
    min_scale=1.0,
    max_scale=8.0,
    # a double tap may zoom past max_scale up to here to fill the view
    max_fill_scale=16.0,
    reset_threshold=1.1,
    tap_zoom_level=2.5,
    min_scale_epsilon=0.01,
    bounce_enabled=True,
    zoom_easing='cubic_out',
    bounce_easing='spring',
    zoom_duration_ms=250,
    zoom_duration_bounce_ms=600,
    reset_duration_ms=250,
    reset_duration_bounce_ms=800,
    aspect='fit',
)

controller_states = ('idle', 'pinch', 'pan', 'animating')


class ControllerError(Exception):
    pass


class PinchSession(object):
    """State captured when a pinch starts."""

    def __init__(self, start_scale, anchor):
        self.start_scale = start_scale
        # pinches always scale about the view center
        self.anchor = anchor

    def __repr__(self):
        return "PinchSession(start_scale=%r, anchor=%r)" % (
            self.start_scale, self.anchor)


class PanSession(object):
    """State captured when a pan starts."""

    def __init__(self, base_x, base_y):
        self.base_x = base_x
        self.base_y = base_y

    def __repr__(self):
        return "PanSession(base_x=%r, base_y=%r)" % (
            self.base_x, self.base_y)


class ZoomPanController(Callback.Callbacks):
    """Gesture and animation state machine for a zoomable image.

    Parameters
    ----------
    logger : `logging.Logger` or None
        Logger for tracing gestures and animations.

    settings : `~zoomview.misc.Settings.SettingGroup` or None
        Preferences; missing keys are filled from `default_settings`.

    scheduler : `~zoomview.animation.AnimationScheduler` or None
        Scheduler the host ticks once per frame.  One is created if
        not supplied.

    Callbacks
    ---------
    'transform-changed' : fn(controller, transform)
    'state-changed' : fn(controller, old_state, new_state)
    'closed' : fn(controller)
    """

    # the single slot shared by zoom and reset animations
    anim_name = 'ZoomPanAnimation'

    def __init__(self, logger=None, settings=None, scheduler=None):
        Callback.Callbacks.__init__(self)

        if logger is not None:
            self.logger = logger
        else:
            self.logger = logging.getLogger('zoomview')

        if settings is None:
            settings = Settings.SettingGroup(name='zoompan',
                                             logger=self.logger)
        self.settings = settings
        self.t_ = settings
        self.t_.add_defaults(**default_settings)
        self.t_.get_setting('aspect').add_callback('set',
                                                   self.aspect_change_cb)
        self.t_.get_setting('bounce_enabled').add_callback(
            'set', self.bounce_change_cb)

        if scheduler is None:
            scheduler = AnimationScheduler(logger=self.logger)
        self.scheduler = scheduler

        self._viewport = Size(0.0, 0.0)
        self._intrinsic = None
        self._override = None

        # what is displayed
        self._transform = trcalc.identity
        # committed starting point for the next interaction
        self._baseline = trcalc.identity
        # values being assembled by the tweens of the current frame
        self._frame = [1.0, 0.0, 0.0]

        self._state = 'idle'
        self._session = None
        self._animation = None
        self._closed = False

        for name in ('transform-changed', 'state-changed', 'closed'):
            self.enable_callback(name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    #####  Queries #####

    def get_settings(self):
        return self.t_

    def get_logger(self):
        return self.logger

    def get_transform(self):
        return self._transform

    def get_scale(self):
        return self._transform.scale

    def get_translation(self):
        return (self._transform.translate_x, self._transform.translate_y)

    def get_baseline(self):
        return self._baseline

    def get_viewport_size(self):
        return self._viewport

    def get_rendered_size(self):
        return trcalc.get_rendered_size(self._viewport, self._intrinsic,
                                        override=self._override,
                                        aspect=self.t_['aspect'])

    def get_max_translation(self, scale=None):
        if scale is None:
            scale = self._transform.scale
        return trcalc.get_max_translation(self.get_rendered_size(), scale,
                                          self._viewport)

    def get_state(self):
        return self._state

    def get_session(self):
        return self._session

    def is_closed(self):
        return self._closed

    #####  Layout setters #####

    def set_viewport_size(self, width, height):
        """Set the size of the view.  Returns the rendered image size."""
        if self._ignore_closed('set_viewport_size'):
            return Size(0.0, 0.0)
        self._viewport = Size(float(width), float(height))
        return self._relayout()

    def set_image_size(self, width, height):
        """Set the measured (natural) size of the image.  Returns the
        rendered image size.
        """
        if self._ignore_closed('set_image_size'):
            return Size(0.0, 0.0)
        self._intrinsic = Size(width, height)
        return self._relayout()

    def set_image_dimensions(self, width, height):
        """Set an explicit image size that takes precedence over the
        measured one.  Non-positive values (the default is -1) leave the
        measured size in charge.  Returns the rendered image size.
        """
        if self._ignore_closed('set_image_dimensions'):
            return Size(0.0, 0.0)
        self._override = Size(width, height)
        return self._relayout()

    def set_aspect(self, aspect):
        if aspect not in trcalc.aspect_modes:
            raise trcalc.TransformError("Invalid aspect mode '%s'" % (
                aspect))
        # relayout happens in aspect_change_cb
        self.t_.set(aspect=aspect)
        return self.get_rendered_size()

    def set_bounce_enabled(self, tf):
        self.t_.set(bounce_enabled=bool(tf))

    def is_bounce_enabled(self):
        return self.t_['bounce_enabled']

    def aspect_change_cb(self, setting, value):
        if not self._closed:
            self._relayout()

    def bounce_change_cb(self, setting, value):
        self.logger.debug("bounce animations %s" % (
            'enabled' if value else 'disabled'))

    def _relayout(self):
        rendered = self.get_rendered_size()
        self.logger.debug("viewport=%s rendered=%s" % (
            str(tuple(self._viewport)), str(tuple(rendered))))
        self._baseline = trcalc.clamp_transform(self._baseline, rendered,
                                                self._viewport)
        self._set_transform(*self._transform)
        return rendered

    #####  Transform writes #####

    def _set_transform(self, scale, x, y):
        tr = trcalc.clamp_transform(Transform(float(scale), x, y),
                                    self.get_rendered_size(),
                                    self._viewport)
        self._transform = tr
        self.make_callback('transform-changed', tr)
        return tr

    def _commit_baseline(self):
        self._baseline = self._transform

    def _set_state(self, state):
        old_state, self._state = self._state, state
        if old_state != state:
            self.logger.debug("state %s -> %s" % (old_state, state))
            self.make_callback('state-changed', old_state, state)

    def _ignore_closed(self, what):
        if self._closed:
            self.logger.debug("ignoring %s on closed controller" % (what))
            return True
        return False

    def _check_gesture_state(self, state):
        if state not in gesture_states:
            raise ControllerError("Invalid gesture state '%s'" % (state))

    def _end_session(self):
        # whatever the gesture left on screen is the new starting point
        if self._session is not None:
            self._commit_baseline()
        self._session = None

    #####  Pinch #####

    def pi_zoom(self, event):
        """Zoom the image by a pinch gesture, about the view center."""
        self._check_gesture_state(event.state)
        if self._ignore_closed('pinch'):
            return False
        event.accept()

        if event.state == 'start':
            self._pinch_start()

        elif event.state == 'move':
            if not isinstance(self._session, PinchSession):
                self._pinch_start()
            self._pinch_move(event.scale)

        else:
            self._pinch_stop()

        return True

    def _pinch_start(self):
        self.cancel_animation()
        self._end_session()
        ctr = (self._viewport.width / 2.0, self._viewport.height / 2.0)
        self._session = PinchSession(self._transform.scale, ctr)
        self.logger.debug("pinch start: %s" % (self._session))
        self._set_state('pinch')

    def _pinch_move(self, pinch_scale):
        session = self._session
        scale = (self._transform.scale +
                 (pinch_scale - 1.0) * session.start_scale)
        scale = trcalc.clamp_scale(scale, self.t_['min_scale'],
                                   self.t_['max_scale'])
        self._set_transform(scale, self._transform.translate_x,
                            self._transform.translate_y)

    def _pinch_stop(self):
        self._end_session()
        self._set_state('idle')

        scale = self._transform.scale
        self.logger.debug("pinch stop: scale=%.4f" % (scale))
        if scale < self.t_['reset_threshold']:
            # a nearly unzoomed image snaps back to rest
            self.reset_image()

    #####  Pan #####

    def pa_pan(self, event):
        """Move the zoomed image by a pan gesture.  Does nothing unless
        the image is zoomed in.
        """
        self._check_gesture_state(event.state)
        if self._ignore_closed('pan'):
            return False

        if self._transform.scale <= 1.0:
            if isinstance(self._session, PanSession):
                self._session = None
                self._set_state('idle')
            return False
        event.accept()

        if event.state == 'start':
            self._pan_start()

        elif event.state == 'move':
            if not isinstance(self._session, PanSession):
                self._pan_start()
            self._pan_move(event.delta_x, event.delta_y)

        elif isinstance(self._session, PanSession):
            self._pan_stop()

        return True

    def _pan_start(self):
        self.cancel_animation()
        self._end_session()
        self._session = PanSession(self._baseline.translate_x,
                                   self._baseline.translate_y)
        self.logger.debug("pan start: %s" % (self._session))
        self._set_state('pan')

    def _pan_move(self, delta_x, delta_y):
        session = self._session
        tr = self._set_transform(self._transform.scale,
                                 session.base_x + delta_x,
                                 session.base_y + delta_y)
        self.logger.debug("pan: target=(%.2f, %.2f) clamped=(%.2f, %.2f)" % (
            session.base_x + delta_x, session.base_y + delta_y,
            tr.translate_x, tr.translate_y))

    def _pan_stop(self):
        self._end_session()
        self._set_state('idle')

    #####  Double tap and animations #####

    def double_tap(self, event):
        """Zoom in on the tapped point, or zoom back out if the image
        is already zoomed in.  Returns a Future.
        """
        if self._ignore_closed('double tap'):
            return resolved(False)
        event.accept()

        if self._transform.scale > 1.0:
            return self.reset_image()
        return self.zoom_to_point(event.x, event.y)

    def zoom_to_point(self, x, y):
        """Animate to the tap zoom target for view-local point (x, y).
        Returns a Future.
        """
        if self._ignore_closed('zoom'):
            return resolved(False)

        target = trcalc.get_tap_zoom_target(
            (x, y), self._viewport, self.get_rendered_size(),
            zoom_level=self.t_['tap_zoom_level'],
            max_scale=self.t_['max_scale'],
            max_fill_scale=self.t_['max_fill_scale'])
        self.logger.debug("zoom to (%.2f, %.2f): target=%s" % (
            x, y, str(target)))

        if self.t_['bounce_enabled']:
            ease = easing.get_easing(self.t_['bounce_easing'])
            duration = self.t_['zoom_duration_bounce_ms']
        else:
            ease = easing.get_easing(self.t_['zoom_easing'])
            duration = self.t_['zoom_duration_ms']

        start = self._transform
        tweens = [Tween(start.scale, target.scale, self._tween_scale, ease),
                  Tween(np.array(start[1:]), np.array(target[1:]),
                        self._tween_translation, ease)]
        return self._run_animation(tweens, duration, target)

    def reset_image(self):
        """Animate back to scale 1 with no translation.  Returns a
        Future.
        """
        if self._ignore_closed('reset'):
            return resolved(False)

        if (self._transform == trcalc.identity and
                not self.scheduler.is_running(self.anim_name)):
            self._end_session()
            self._set_state('idle')
            return resolved(True)

        start = self._transform
        if self.t_['bounce_enabled']:
            # one spring sample per frame drives scale and translation
            # together so they settle in step
            ease = easing.get_easing(self.t_['bounce_easing'])
            tweens = [Driver(partial(self._bounce_reset_step, start), ease)]
            duration = self.t_['reset_duration_bounce_ms']
        else:
            ease = easing.get_easing(self.t_['zoom_easing'])
            tweens = [Tween(start.scale, 1.0, self._tween_scale, ease),
                      Tween(np.array(start[1:]), np.zeros(2),
                            self._tween_translation, ease)]
            duration = self.t_['reset_duration_ms']

        self.logger.debug("reset from %s" % (str(start)))
        return self._run_animation(tweens, duration, trcalc.identity)

    def cancel_animation(self):
        """Cancel the zoom/reset animation, if one is running.  The
        displayed transform becomes the baseline.
        """
        return self.scheduler.abort(self.anim_name)

    def _tween_scale(self, value):
        self._frame[0] = value

    def _tween_translation(self, value):
        self._frame[1], self._frame[2] = value[0], value[1]

    def _bounce_reset_step(self, start, progress):
        self._frame[0] = start.scale + (1.0 - start.scale) * progress
        self._frame[1] = start.translate_x * (1.0 - progress)
        self._frame[2] = start.translate_y * (1.0 - progress)

    def _flush_frame(self, animation):
        scale, x, y = self._frame
        # the spring can overshoot far enough to invert the image
        scale = max(scale, self.t_['min_scale_epsilon'])
        self._set_transform(scale, x, y)

    def _run_animation(self, tweens, duration, target):
        self.cancel_animation()
        self._end_session()

        future = Future(data=target)
        self._frame = list(self._transform)
        animation = Animation(self.anim_name, tweens, duration,
                              on_step=self._flush_frame,
                              on_finish=partial(self._animation_done,
                                                target, future))
        self._animation = animation
        self._set_state('animating')
        self.scheduler.commit(animation)
        return future

    def _animation_done(self, target, future, animation, canceled):
        if not self._closed:
            if canceled:
                self._commit_baseline()
            else:
                # land exactly on the target, whatever the curve did
                self._set_transform(*target)
                self._commit_baseline()

            if self._animation is animation:
                self._animation = None
                self._set_state('idle')

        future.resolve(not canceled)

    #####  Teardown #####

    def close(self):
        """Release the controller.

        Cancels any running animation before anything else, so no
        completion can touch the controller afterward.  Safe to call
        more than once.
        """
        if self._closed:
            return
        self.logger.debug("closing controller")
        self._closed = True

        self.cancel_animation()
        self._animation = None
        self._session = None

        self.make_callback('closed')
        self.clear_all_callbacks()

        self.t_.get_setting('aspect').remove_callback(
            'set', self.aspect_change_cb)
        self.t_.get_setting('bounce_enabled').remove_callback(
            'set', self.bounce_change_cb)

        self._intrinsic = None
        self._override = None
        self._viewport = Size(0.0, 0.0)

# END
