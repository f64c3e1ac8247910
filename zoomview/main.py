#
# main.py -- replay a gesture script through a zoom/pan controller
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
Usage:
    zoomview [options] SCRIPT

Runs the gestures in SCRIPT (see `zoomview.util.gesture_script`)
against a headless controller on a virtual clock and prints every
transform written, one line per write:

    t=<ms> scale=<scale> tx=<x> ty=<y>

Use '-' as SCRIPT to read from standard input.
"""
import sys
import argparse

from zoomview import __version__
from zoomview.misc import Settings, log
from zoomview.controller import ZoomPanController
from zoomview.animation import AnimationScheduler
from zoomview.trcalc import aspect_modes
from zoomview.util import gesture_script


class VirtualClock(object):

    def __init__(self, start_ms=0.0):
        self.now_ms = start_ms

    def __call__(self):
        return self.now_ms

    def advance(self, delta_ms):
        self.now_ms += delta_ms


def parse_size(text):
    try:
        wd, ht = text.lower().split('x')
        return (float(wd), float(ht))
    except ValueError:
        raise argparse.ArgumentTypeError(
            "size must look like WIDTHxHEIGHT, not '%s'" % (text))


def parse_fps(text):
    try:
        fps = float(text)
    except ValueError:
        fps = 0.0
    # the wait loop needs frames of finite, positive length
    if not 0.0 < fps < float('inf'):
        raise argparse.ArgumentTypeError(
            "frame rate must be a positive number, not '%s'" % (text))
    return fps


def make_parser():
    parser = argparse.ArgumentParser(
        prog='zoomview',
        description="Replay a gesture script through the zoom/pan controller")
    parser.add_argument("script", metavar="SCRIPT",
                        help="Gesture script file, or '-' for stdin")
    parser.add_argument("--viewport", dest="viewport", type=parse_size,
                        default=(400.0, 200.0), metavar="WxH",
                        help="Viewport size (default 400x200)")
    parser.add_argument("--image", dest="image", type=parse_size,
                        default=None, metavar="WxH",
                        help="Natural image size")
    parser.add_argument("--aspect", dest="aspect", choices=aspect_modes,
                        default=None, help="Aspect mode")
    parser.add_argument("--bounce", dest="bounce", action="store_true",
                        default=None, help="Use spring animations")
    parser.add_argument("--no-bounce", dest="bounce", action="store_false",
                        default=None, help="Use plain eased animations")
    parser.add_argument("--fps", dest="fps", type=parse_fps, default=60.0,
                        metavar="N", help="Frames per second for 'wait'")
    parser.add_argument("--prefs", dest="prefs", metavar="FILE",
                        default=None, help="Load settings from FILE")
    parser.add_argument("--version", action="version",
                        version="%(prog)s " + __version__)
    log.addlogopts(parser)
    return parser


def run_script(controller, clock, commands, fps=60.0):
    """Feed `commands` to `controller`, advancing `clock` and ticking
    the controller's scheduler for 'wait' commands.
    """
    frame_ms = 1000.0 / fps
    scheduler = controller.scheduler

    for cmd in commands:
        if cmd.verb == 'pinch':
            controller.pi_zoom(gesture_script.to_event(cmd))

        elif cmd.verb == 'pan':
            controller.pa_pan(gesture_script.to_event(cmd))

        elif cmd.verb == 'tap':
            controller.double_tap(gesture_script.to_event(cmd))

        elif cmd.verb == 'reset':
            controller.reset_image()

        elif cmd.verb == 'viewport':
            controller.set_viewport_size(*cmd.args)

        elif cmd.verb == 'image':
            controller.set_image_size(*cmd.args)

        elif cmd.verb == 'wait':
            end_ms = clock() + cmd.args[0]
            while clock() < end_ms:
                clock.advance(min(frame_ms, end_ms - clock()))
                scheduler.tick()


def main(sys_argv, out_f=None):
    if out_f is None:
        out_f = sys.stdout

    parser = make_parser()
    options = parser.parse_args(sys_argv[1:])

    logger = log.get_logger(name='zoomview', options=options)

    settings = Settings.SettingGroup(name='zoompan', logger=logger,
                                     preffile=options.prefs)
    try:
        if options.prefs is not None:
            settings.load(onError='raise')
        if options.script == '-':
            commands = gesture_script.parse(sys.stdin.read())
        else:
            commands = gesture_script.parse_file(options.script)

    except (Settings.SettingError, gesture_script.ScriptError,
            OSError) as e:
        logger.error(str(e))
        sys.stderr.write("zoomview: %s\n" % (str(e)))
        return 1

    clock = VirtualClock()
    scheduler = AnimationScheduler(logger=logger, clock=clock)

    def transform_cb(controller, tr):
        out_f.write("t=%.1f scale=%.4f tx=%.2f ty=%.2f\n" % (
            clock(), tr.scale, tr.translate_x, tr.translate_y))

    with ZoomPanController(logger=logger, settings=settings,
                           scheduler=scheduler) as controller:
        if options.aspect is not None:
            controller.set_aspect(options.aspect)
        if options.bounce is not None:
            controller.set_bounce_enabled(options.bounce)
        controller.set_viewport_size(*options.viewport)
        if options.image is not None:
            controller.set_image_size(*options.image)

        controller.add_callback('transform-changed', transform_cb)
        run_script(controller, clock, commands, fps=options.fps)

    return 0


def _main():
    """Run from command line."""
    sys.exit(main(sys.argv))

# END
