#
# gesture_script.py -- plain text scripts of gestures for replay
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
"""
A gesture script is a text file with one command per line.  Blank
lines and lines starting with '#' are ignored.

    viewport 400 200      # set the view size
    image 1600 900        # set the natural image size
    pinch start
    pinch move 1.25       # incremental pinch scale
    pinch stop
    pan start
    pan move 40 -10       # total movement since the pan started
    pan stop
    tap 120 80            # double tap at view-local (x, y)
    reset
    wait 300              # let 300 ms of animation frames run
"""
from collections import namedtuple

from zoomview.events import PinchEvent, PanEvent, TapEvent

__all__ = ['ScriptError', 'Command', 'parse', 'parse_file', 'to_event']

Command = namedtuple('Command', ['line_no', 'verb', 'args'])


class ScriptError(Exception):
    pass


# verb -> {first word: number of numeric args that follow} or number of args
_grammar = {
    'pinch': {'start': 0, 'move': 1, 'stop': 0},
    'pan': {'start': 0, 'move': 2, 'stop': 0},
    'tap': 2,
    'reset': 0,
    'wait': 1,
    'viewport': 2,
    'image': 2,
}


def _to_numbers(line_no, words):
    try:
        return tuple(float(w) for w in words)
    except ValueError:
        raise ScriptError("line %d: expected numbers, got '%s'" % (
            line_no, ' '.join(words)))


def parse_line(line_no, line):
    """Parse one line into a `Command`, or None for a blank line or
    comment.
    """
    line = line.split('#', 1)[0].strip()
    if len(line) == 0:
        return None

    words = line.split()
    verb, rest = words[0].lower(), words[1:]
    if verb not in _grammar:
        raise ScriptError("line %d: unknown command '%s'" % (line_no, verb))

    nargs = _grammar[verb]
    if isinstance(nargs, dict):
        # gesture with a phase word
        if len(rest) == 0 or rest[0].lower() not in nargs:
            raise ScriptError("line %d: '%s' needs one of %s" % (
                line_no, verb, ', '.join(sorted(nargs.keys()))))
        phase, rest = rest[0].lower(), rest[1:]
        if len(rest) != nargs[phase]:
            raise ScriptError("line %d: '%s %s' takes %d value(s)" % (
                line_no, verb, phase, nargs[phase]))
        return Command(line_no, verb, (phase,) + _to_numbers(line_no, rest))

    if len(rest) != nargs:
        raise ScriptError("line %d: '%s' takes %d value(s)" % (
            line_no, verb, nargs))
    return Command(line_no, verb, _to_numbers(line_no, rest))


def parse(buf):
    """Parse the text of a script into a list of `Command`."""
    commands = []
    for idx, line in enumerate(buf.split('\n')):
        cmd = parse_line(idx + 1, line)
        if cmd is not None:
            commands.append(cmd)
    return commands


def parse_file(path):
    with open(path, 'r') as in_f:
        return parse(in_f.read())


def to_event(cmd):
    """Return the gesture event for a pinch, pan or tap command."""
    if cmd.verb == 'pinch':
        phase = cmd.args[0]
        scale = cmd.args[1] if phase == 'move' else 1.0
        return PinchEvent(state=phase, scale=scale)

    if cmd.verb == 'pan':
        phase = cmd.args[0]
        dx, dy = cmd.args[1:3] if phase == 'move' else (0.0, 0.0)
        return PanEvent(state=phase, delta_x=dx, delta_y=dy)

    if cmd.verb == 'tap':
        return TapEvent(x=cmd.args[0], y=cmd.args[1])

    raise ScriptError("line %d: '%s' is not a gesture" % (
        cmd.line_no, cmd.verb))

# END
