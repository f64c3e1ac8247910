import logging

import numpy as np
import pytest

from zoomview import trcalc
from zoomview.animation import AnimationScheduler
from zoomview.controller import (ZoomPanController, ControllerError,
                                 PinchSession, PanSession)
from zoomview.events import PinchEvent, PanEvent, TapEvent

FRAME_MS = 1000.0 / 60


class TestZoomPanController:

    def setup_method(self):
        self.logger = logging.getLogger("TestZoomPanController")
        self.now = 0.0
        self.scheduler = AnimationScheduler(logger=self.logger,
                                            clock=lambda: self.now)
        self.controller = ZoomPanController(logger=self.logger,
                                            scheduler=self.scheduler)
        self.controller.set_viewport_size(400, 200)
        self.controller.set_image_size(1600, 900)

        self.writes = []
        self.controller.add_callback('transform-changed', self._write_cb)

    def teardown_method(self):
        self.controller.close()

    def _write_cb(self, controller, tr):
        self.writes.append(tr)

    def _run(self, ms):
        end = self.now + ms
        while self.now < end:
            self.now = min(end, self.now + FRAME_MS)
            self.scheduler.tick()

    def _pinch(self, *scales):
        viewer = self.controller
        viewer.pi_zoom(PinchEvent(state='start'))
        for scale in scales:
            viewer.pi_zoom(PinchEvent(state='move', scale=scale))
        viewer.pi_zoom(PinchEvent(state='stop'))

    def _pan(self, dx, dy):
        viewer = self.controller
        viewer.pa_pan(PanEvent(state='start'))
        viewer.pa_pan(PanEvent(state='move', delta_x=dx, delta_y=dy))
        viewer.pa_pan(PanEvent(state='stop'))

    def _assert_in_bounds(self, transforms):
        rendered = self.controller.get_rendered_size()
        viewport = self.controller.get_viewport_size()
        for tr in transforms:
            max_x, max_y = trcalc.get_max_translation(rendered, tr.scale,
                                                      viewport)
            assert abs(tr.translate_x) <= max_x + 1e-9
            assert abs(tr.translate_y) <= max_y + 1e-9

    ##### Layout #####

    def test_initial_state(self):
        viewer = self.controller
        assert viewer.get_transform() == (1.0, 0.0, 0.0)
        assert viewer.get_state() == 'idle'
        assert viewer.get_session() is None
        wd, ht = viewer.get_rendered_size()
        assert np.isclose(wd, 355.5556, atol=1e-3) and ht == 200.0

    def test_set_image_dimensions(self):
        viewer = self.controller
        rendered = viewer.set_image_dimensions(100, 100)
        assert rendered == (200.0, 200.0)

        rendered = viewer.set_image_dimensions(-1, -1)
        assert np.isclose(rendered.width, 355.5556, atol=1e-3)

    def test_set_aspect(self):
        viewer = self.controller
        rendered = viewer.set_aspect('stretch')
        assert rendered == (400.0, 200.0)
        assert viewer.get_settings()['aspect'] == 'stretch'

        with pytest.raises(trcalc.TransformError):
            viewer.set_aspect('tile')

    def test_viewport_change_reclamps(self):
        viewer = self.controller
        self._pinch(2.0)
        self._pan(1000.0, 1000.0)
        x, y = viewer.get_translation()
        assert np.isclose(x, 155.5556, atol=1e-3) and np.isclose(y, 100.0)

        # a square view renders the image 400x225, leaving little room
        # to pan vertically at scale 2
        viewer.set_viewport_size(400, 400)
        self._assert_in_bounds([viewer.get_transform(),
                                viewer.get_baseline()])
        max_x, max_y = viewer.get_max_translation()
        assert np.isclose(max_y, 25.0)
        assert viewer.get_translation() == (x, max_y)
        assert viewer.get_baseline().translate_y == max_y

    ##### Pinch #####

    def test_pinch_scale(self):
        viewer = self.controller
        viewer.pi_zoom(PinchEvent(state='start'))
        session = viewer.get_session()
        assert isinstance(session, PinchSession)
        assert session.start_scale == 1.0
        assert session.anchor == (200.0, 100.0)
        assert viewer.get_state() == 'pinch'

        viewer.pi_zoom(PinchEvent(state='move', scale=1.5))
        assert viewer.get_scale() == 1.5
        viewer.pi_zoom(PinchEvent(state='move', scale=1.5))
        assert viewer.get_scale() == 2.0

    def test_pinch_scale_clamped(self):
        viewer = self.controller
        viewer.pi_zoom(PinchEvent(state='start'))
        for i in range(20):
            viewer.pi_zoom(PinchEvent(state='move', scale=2.0))
            assert 1.0 <= viewer.get_scale() <= 8.0
        assert viewer.get_scale() == 8.0

        for i in range(20):
            viewer.pi_zoom(PinchEvent(state='move', scale=0.2))
            assert 1.0 <= viewer.get_scale() <= 8.0
        assert viewer.get_scale() == 1.0

    def test_pinch_uses_start_scale(self):
        viewer = self.controller
        self._pinch(3.0)
        assert viewer.get_scale() == 3.0

        viewer.pi_zoom(PinchEvent(state='start'))
        viewer.pi_zoom(PinchEvent(state='move', scale=1.1))
        assert np.isclose(viewer.get_scale(), 3.0 + 0.1 * 3.0)

    def test_pinch_stop_keeps_zoom(self):
        viewer = self.controller
        self._pinch(2.0)
        assert viewer.get_state() == 'idle'
        assert viewer.get_session() is None
        assert viewer.get_baseline() == (2.0, 0.0, 0.0)
        assert not self.scheduler.is_running(viewer.anim_name)

    def test_pinch_stop_near_one_resets(self):
        viewer = self.controller
        self._pinch(1.05)
        assert viewer.get_state() == 'animating'

        self._run(1000)
        assert viewer.get_transform() == (1.0, 0.0, 0.0)
        assert viewer.get_state() == 'idle'

    def test_pinch_reclamps_translation(self):
        viewer = self.controller
        self._pinch(3.0)
        self._pan(1000.0, 1000.0)
        x, y = viewer.get_translation()
        assert np.isclose(x, 333.3333, atol=1e-3) and np.isclose(y, 200.0)

        viewer.pi_zoom(PinchEvent(state='start'))
        viewer.pi_zoom(PinchEvent(state='move', scale=0.5))
        assert viewer.get_scale() == 1.5
        x, y = viewer.get_translation()
        assert np.isclose(x, 66.6667, atol=1e-3) and np.isclose(y, 50.0)
        self._assert_in_bounds(self.writes)

    def test_pinch_move_without_start(self):
        viewer = self.controller
        viewer.pi_zoom(PinchEvent(state='move', scale=1.5))
        assert viewer.get_scale() == 1.5
        assert isinstance(viewer.get_session(), PinchSession)

    ##### Pan #####

    def test_pan_ignored_unzoomed(self):
        viewer = self.controller
        for state, dx in (('start', 0.0), ('move', 50.0), ('stop', 0.0)):
            event = PanEvent(state=state, delta_x=dx, delta_y=dx)
            assert viewer.pa_pan(event) is False
            assert not event.was_handled()
        assert viewer.get_translation() == (0.0, 0.0)
        assert viewer.get_state() == 'idle'
        assert self.writes == []

    def test_pan(self):
        viewer = self.controller
        self._pinch(2.0)

        viewer.pa_pan(PanEvent(state='start'))
        assert isinstance(viewer.get_session(), PanSession)
        assert viewer.get_state() == 'pan'

        viewer.pa_pan(PanEvent(state='move', delta_x=100.0, delta_y=50.0))
        assert viewer.get_translation() == (100.0, 50.0)

        viewer.pa_pan(PanEvent(state='move', delta_x=1000.0,
                               delta_y=-1000.0))
        x, y = viewer.get_translation()
        assert np.isclose(x, 155.5556, atol=1e-3) and y == -100.0

        viewer.pa_pan(PanEvent(state='stop'))
        assert viewer.get_state() == 'idle'
        assert viewer.get_baseline().translate_x == x

        # next pan continues from the committed offset
        viewer.pa_pan(PanEvent(state='start'))
        viewer.pa_pan(PanEvent(state='move', delta_x=-10.0, delta_y=0.0))
        assert np.isclose(viewer.get_translation()[0], x - 10.0)
        self._assert_in_bounds(self.writes)

    def test_pan_move_without_start(self):
        viewer = self.controller
        self._pinch(2.0)
        viewer.pa_pan(PanEvent(state='move', delta_x=20.0, delta_y=10.0))
        assert viewer.get_translation() == (20.0, 10.0)

    ##### Double tap / zoom #####

    def test_double_tap_zoom(self):
        viewer = self.controller
        viewer.set_bounce_enabled(False)
        future = viewer.double_tap(TapEvent(x=240.0, y=110.0))
        assert viewer.get_state() == 'animating'
        assert not future.has_value()

        self._run(250)
        assert viewer.get_transform() == (2.5, -100.0, -25.0)
        assert viewer.get_baseline() == (2.5, -100.0, -25.0)
        assert viewer.get_state() == 'idle'
        assert future.get_value() is True
        self._assert_in_bounds(self.writes)

        scales = [tr.scale for tr in self.writes]
        assert scales == sorted(scales)

    def test_double_tap_zoom_bounce(self):
        viewer = self.controller
        future = viewer.double_tap(TapEvent(x=240.0, y=110.0))

        self._run(300)
        assert not future.has_value()
        self._run(300)
        assert future.get_value() is True
        assert viewer.get_transform() == (2.5, -100.0, -25.0)

        # the spring overshoots the target on the way
        assert max(tr.scale for tr in self.writes) > 2.5
        self._assert_in_bounds(self.writes)

    def test_double_tap_zoomed_resets(self):
        viewer = self.controller
        self._pinch(2.0)
        viewer.double_tap(TapEvent(x=10.0, y=10.0))

        self._run(1000)
        assert viewer.get_transform() == (1.0, 0.0, 0.0)

    def test_second_zoom_replaces_first(self):
        viewer = self.controller
        first = viewer.zoom_to_point(240.0, 110.0)
        self._run(100)
        second = viewer.zoom_to_point(100.0, 50.0)

        assert first.get_value() is False
        self._run(1000)
        assert second.get_value() is True

        target = trcalc.get_tap_zoom_target((100.0, 50.0),
                                            viewer.get_viewport_size(),
                                            viewer.get_rendered_size())
        assert viewer.get_transform() == target
        self._assert_in_bounds(self.writes)

    def test_second_double_tap_before_first_frame(self):
        viewer = self.controller
        viewer.set_bounce_enabled(False)
        first = viewer.double_tap(TapEvent(x=240.0, y=110.0))
        second = viewer.double_tap(TapEvent(x=160.0, y=90.0))

        self._run(500)
        assert first.get_value() is False
        assert second.get_value() is True
        assert viewer.get_transform() == (2.5, 100.0, 25.0)

    def test_gesture_cancels_animation(self):
        viewer = self.controller
        future = viewer.zoom_to_point(240.0, 110.0)
        self._run(100)
        shown = viewer.get_transform()

        viewer.pi_zoom(PinchEvent(state='start'))
        assert future.get_value() is False
        assert viewer.get_state() == 'pinch'
        assert viewer.get_baseline() == shown
        assert not self.scheduler.is_running(viewer.anim_name)

        self._run(1000)
        assert viewer.get_transform() == shown

    ##### Reset #####

    def _zoom_in(self):
        viewer = self.controller
        bounce = viewer.is_bounce_enabled()
        viewer.set_bounce_enabled(False)
        viewer.zoom_to_point(240.0, 110.0)
        self._run(250)
        viewer.set_bounce_enabled(bounce)
        del self.writes[:]

    def test_reset(self):
        viewer = self.controller
        self._zoom_in()
        viewer.set_bounce_enabled(False)
        future = viewer.reset_image()

        self._run(250)
        assert future.get_value() is True
        assert viewer.get_transform() == (1.0, 0.0, 0.0)
        assert viewer.get_baseline() == (1.0, 0.0, 0.0)
        self._assert_in_bounds(self.writes)

    def test_reset_bounce(self):
        viewer = self.controller
        self._zoom_in()
        future = viewer.reset_image()

        self._run(800)
        assert future.get_value() is True
        assert viewer.get_transform() == (1.0, 0.0, 0.0)
        # overshoots below 1 before settling
        assert min(tr.scale for tr in self.writes) < 1.0
        self._assert_in_bounds(self.writes)

    def test_reset_bounce_scale_floor(self):
        viewer = self.controller
        self._pinch(8.0)
        viewer.reset_image()

        self._run(800)
        assert min(tr.scale for tr in self.writes) == 0.01
        assert viewer.get_transform() == (1.0, 0.0, 0.0)

    def test_reset_at_rest(self):
        viewer = self.controller
        future = viewer.reset_image()
        assert future.get_value() is True
        assert not self.scheduler.is_running(viewer.anim_name)
        assert self.writes == []

    def test_second_reset_replaces_first(self):
        viewer = self.controller
        self._zoom_in()
        first = viewer.reset_image()
        self._run(200)
        second = viewer.reset_image()

        assert first.get_value() is False
        self._run(800)
        assert second.get_value() is True
        assert viewer.get_transform() == (1.0, 0.0, 0.0)

    ##### States, errors and teardown #####

    def test_state_changed_callbacks(self):
        viewer = self.controller
        changes = []
        viewer.add_callback('state-changed',
                            lambda v, old, new: changes.append((old, new)))
        self._pinch(2.0)
        self._pan(10.0, 10.0)

        assert changes == [('idle', 'pinch'), ('pinch', 'idle'),
                           ('idle', 'pan'), ('pan', 'idle')]

    def test_bad_gesture_state(self):
        with pytest.raises(ControllerError):
            self.controller.pi_zoom(PinchEvent(state='begin'))

    def test_close_cancels_animation(self):
        viewer = self.controller
        closed = []
        viewer.add_callback('closed', lambda v: closed.append(v))
        future = viewer.zoom_to_point(240.0, 110.0)
        self._run(100)
        del self.writes[:]

        viewer.close()
        assert viewer.is_closed()
        assert closed == [viewer]
        assert future.get_value() is False
        assert not self.scheduler.is_running(viewer.anim_name)

        self._run(1000)
        assert self.writes == []

        # later input is ignored
        assert viewer.pi_zoom(PinchEvent(state='start')) is False
        assert viewer.double_tap(TapEvent(x=1.0, y=1.0)).get_value() is False
        assert viewer.reset_image().get_value() is False

        # closing twice is harmless
        viewer.close()

    def test_context_manager(self):
        scheduler = AnimationScheduler(logger=self.logger,
                                       clock=lambda: self.now)
        with ZoomPanController(logger=self.logger,
                               scheduler=scheduler) as viewer:
            viewer.set_viewport_size(400, 200)
            future = viewer.zoom_to_point(0.0, 0.0)
        assert viewer.is_closed()
        assert future.get_value() is False

    def test_zero_viewport(self):
        viewer = self.controller
        viewer.set_viewport_size(0, 0)
        assert viewer.get_rendered_size() == (0.0, 0.0)

        viewer.set_bounce_enabled(False)
        viewer.zoom_to_point(50.0, 50.0)
        self._run(250)
        assert viewer.get_translation() == (0.0, 0.0)
        self._pan(100.0, 100.0)
        assert viewer.get_translation() == (0.0, 0.0)

    def test_negative_viewport(self):
        viewer = self.controller
        viewer.set_viewport_size(-100, 200)
        assert viewer.get_rendered_size() == (0.0, 0.0)

        self._pinch(3.0)
        assert viewer.get_scale() == 3.0
        assert viewer.get_max_translation() == (0.0, 0.0)
        self._pan(500.0, 500.0)
        assert viewer.get_translation() == (0.0, 0.0)

    def test_double_tap_fills_wide_image(self):
        viewer = self.controller
        viewer.set_bounce_enabled(False)
        viewer.set_viewport_size(200, 400)
        # renders 200x20, so filling the view takes a scale of 20
        viewer.set_image_size(1000, 100)

        viewer.double_tap(TapEvent(x=100.0, y=200.0))
        self._run(250)
        assert viewer.get_transform() == (16.0, 0.0, 0.0)

        viewer.get_settings().set(max_fill_scale=25.0)
        viewer.reset_image()
        self._run(250)
        viewer.double_tap(TapEvent(x=100.0, y=200.0))
        self._run(250)
        assert np.isclose(viewer.get_scale(), 20.0)
