#
# Callback.py -- Mixin class for programmed callbacks.
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
import logging
import traceback

_logger = logging.getLogger(__name__)


class CallbackError(Exception):
    pass


class Callbacks(object):
    """Mixin that lets an object announce named events to any number
    of registered listeners.

    A listener is called as ``fn(obj, *args, *extra_args, **kwargs)``
    where ``obj`` is the object making the callback, ``args`` are the
    values passed to `make_callback` and ``extra_args`` are the values
    saved when the listener was added.
    """

    def __init__(self):
        self.cb = {}
        self._cb_block = {}

    def clear_callback(self, name):
        try:
            self.cb[name][:] = []
        except KeyError:
            self.cb[name] = []
        self._cb_block[name] = 0

    def enable_callback(self, name):
        if not self.has_callback(name):
            self.clear_callback(name)

    def has_callback(self, name):
        return name in self.cb

    def num_callbacks(self, name):
        return len(self.cb[name])

    def delete_callback(self, name):
        try:
            del self.cb[name]
            self._cb_block.pop(name, None)
        except KeyError:
            raise CallbackError("No callback category of '%s'" % (
                name))

    def add_callback(self, name, fn, *args, **kwargs):
        try:
            tup = (fn, args, kwargs)
            if tup not in self.cb[name]:
                self.cb[name].append(tup)
        except KeyError:
            raise CallbackError("No callback category of '%s'" % (
                name))

    def remove_callback(self, name, fn, *args, **kwargs):
        """Remove a specific callback that was added.
        """
        try:
            tup = (fn, args, kwargs)
            if tup in self.cb[name]:
                self.cb[name].remove(tup)
        except KeyError:
            raise CallbackError("No callback category of '%s'" % (
                name))

    def clear_all_callbacks(self):
        for name in list(self.cb.keys()):
            self.clear_callback(name)

    def block_callback(self, name):
        self._cb_block[name] += 1

    def unblock_callback(self, name):
        self._cb_block[name] -= 1

    def suppress_callback(self, name):
        return SuppressCallback(self, name)

    def make_callback(self, name, *args, **kwargs):
        if not self.has_callback(name):
            return None

        if len(self.cb[name]) == 0:
            return False

        if self._cb_block.get(name, 0) > 0:
            # callback temporarily blocked
            return False

        return self._do_callbacks(name, args, kwargs)

    def _do_callbacks(self, name, args, kwargs):
        result = False
        # copy, a listener may remove itself while we iterate
        for fn, cb_args, cb_kwargs in list(self.cb[name]):
            all_args = [self]
            all_args.extend(args)
            all_args.extend(cb_args)
            all_kwargs = kwargs.copy()
            all_kwargs.update(cb_kwargs)

            try:
                res = fn(*all_args, **all_kwargs)
                if res:
                    result = True

            except Exception as e:
                # keep going, the other listeners still need to hear this
                logger = getattr(self, 'logger', None)
                if logger is None:
                    logger = _logger
                logger.error("Error making callback '%s': %s" % (
                    name, str(e)))
                logger.error("Traceback:\n%s" % (traceback.format_exc()))

        return result


class SuppressCallback(object):
    def __init__(self, cb_obj, cb_name):
        self.cb_obj = cb_obj
        self.cb_name = cb_name

    def __enter__(self):
        self.cb_obj.block_callback(self.cb_name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cb_obj.unblock_callback(self.cb_name)
        return False


# END
