#
# Settings.py -- Simple class to manage stateful user preferences.
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
import re
import ast
import math

from . import Callback

regex_assign = re.compile(r'^([a-zA-Z_]\w*)\s*=\s*(\S.*)$')


class SettingError(Exception):
    pass


class Setting(Callback.Callbacks):
    """One preference value.  Makes a 'set' callback as
    ``fn(setting, value)`` when it changes.
    """

    def __init__(self, value=None, name=None, logger=None):
        Callback.Callbacks.__init__(self)

        self.value = value
        self.name = name
        self.logger = logger

        self.enable_callback('set')

    def set(self, value, callback=True):
        self.value = value
        if callback:
            self.make_callback('set', self.value)

    def get(self):
        return self.value

    def __repr__(self):
        return repr(self.value)

    def __str__(self):
        return str(self.value)


class SettingGroup(object):
    """A named group of `Setting` objects.

    Values are read with ``group['key']`` or ``group.get('key', default)``
    and written with ``group['key'] = value`` or ``group.set(key=value)``.
    Interested parties can watch an individual key with::

        group.get_setting('key').add_callback('set', fn)

    """

    def __init__(self, name=None, logger=None, preffile=None):
        self.name = name
        self.logger = logger
        self.preffile = preffile

        self.group = {}

    def add_settings(self, **kwdargs):
        for key, value in kwdargs.items():
            if key not in self.group:
                self.group[key] = Setting(value=value, name=key,
                                          logger=self.logger)

    def get_setting(self, key):
        return self.group[key]

    def setdefault(self, key, value):
        if key not in self.group:
            self.add_settings(**{key: value})
        return self.group[key].get()

    def add_defaults(self, **kwdargs):
        for key, value in kwdargs.items():
            self.setdefault(key, value)

    def get(self, key, *args):
        """Return the value of `key`.  With a second argument, return
        that instead of raising KeyError when `key` is missing.
        """
        if key in self.group or len(args) == 0:
            return self.group[key].get()
        return args[0]

    def get_dict(self, keylist=None):
        if keylist is None:
            keylist = self.group.keys()
        return {name: self.group[name].value for name in keylist}

    def set_dict(self, d, callback=True):
        for key, value in d.items():
            if key not in self.group:
                self.setdefault(key, value)
            else:
                self.group[key].set(value, callback=False)

        if callback:
            # make callbacks only after all items are set in the group
            for key in d.keys():
                self.group[key].make_callback('set', self.group[key].value)

    def set(self, callback=True, **kwdargs):
        self.set_dict(kwdargs, callback=callback)

    def __getitem__(self, key):
        return self.group[key].value

    def __setitem__(self, key, value):
        if key not in self.group:
            self.add_settings(**{key: value})
        else:
            self.group[key].set(value)

    def __contains__(self, key):
        return key in self.group

    def load(self, onError='raise', buf=None):
        """Load settings from `buf`, or from the preferences file if
        `buf` is None.  `onError` is one of 'raise', 'warn' or 'silent'.
        """
        try:
            if buf is None:
                with open(self.preffile, 'r') as in_f:
                    buf = in_f.read()
            d = dict(eval_assignments(make_assignments(strip_comments(
                buf.split('\n')))))
            self.set_dict(d)

        except Exception as e:
            errmsg = "Error loading settings file (%s): %s" % (
                self.preffile, str(e))
            if onError == 'silent':
                pass
            elif onError == 'warn' and self.logger is not None:
                self.logger.warning(errmsg)
            else:
                raise SettingError(errmsg)

    def _check(self, d):
        for key, value in d.items():
            # NaN and Inf do not survive a literal_eval round trip
            if isinstance(value, float) and not math.isfinite(value):
                raise SettingError("Cannot save non-finite value %s for "
                                   "'%s'" % (str(value), key))
        return d

    def _save(self, out_f, keys, d):
        for key in keys:
            out_f.write("%s = %s\n" % (key, repr(d[key])))

    def save(self, keylist=None, output=None):
        d = self._check(self.get_dict(keylist=keylist))
        keys = sorted(d.keys())

        if output is None:
            output = self.preffile
        if isinstance(output, str):
            with open(output, 'w') as out_f:
                self._save(out_f, keys, d)
        else:
            self._save(output, keys, d)


def strip_comments(lines):
    """Strips all blank lines and comments from `lines`.

    Parameters
    ----------
    lines : iterable of str
        The input file, stripped into lines

    Returns
    -------
    results : iterable of (int, str)
        An iterable containing tuples of (line number, text)
    """
    for line_no, line in enumerate(lines):
        line = line.strip()
        if len(line) == 0 or line.startswith('#'):
            continue
        yield (line_no, line)


def make_assignments(results):
    """Makes line_no, kwd, value string triples from the output of
    `strip_comments()`.  A value may continue over several lines.
    """
    building = False
    kwd, vals, n = None, [], 0
    for line_no, line in results:
        match = regex_assign.match(line)
        if match:
            if building:
                yield n, kwd, ' '.join(vals)

            building = True
            n = line_no
            kwd, val = match.groups()
            vals = [val]
        elif building:
            vals.append(line)
        else:
            raise SettingError("Unexpected syntax on line {}: {}".format(
                line_no + 1, line))

    if len(vals) > 0:
        yield n, kwd, ' '.join(vals)


def eval_assignments(results):
    """Makes kwd, value pairs from the output of `make_assignments()`."""
    for line_no, kwd, val_s in results:
        try:
            val = ast.literal_eval(val_s)
        except (ValueError, SyntaxError) as e:
            raise SettingError("Bad value on line {} ({}): {}".format(
                line_no + 1, kwd, str(e)))

        yield kwd, val

# END
