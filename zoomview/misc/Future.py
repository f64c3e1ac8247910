#
# Future.py -- completion handle for asynchronous operations
#
# This is open-source software licensed under a BSD license.
# Please see the file LICENSE.txt for details.
#
from . import Callback


class FutureError(Exception):
    pass


class Future(Callback.Callbacks):
    """Handle for a result that becomes available later.

    Everything here runs on the UI thread, so there is no blocking
    wait: interested parties register for the 'resolved' callback,
    which is called as ``fn(future, value)``.  Registering after the
    future is resolved calls the function right away.
    """

    def __init__(self, data=None):
        Callback.Callbacks.__init__(self)

        self.res = None
        self._resolved = False
        # User can attach some arbitrary data if desired
        self.data = data

        self.enable_callback('resolved')

    def get_data(self):
        return self.data

    def has_value(self):
        return self._resolved

    def resolve(self, value):
        if self._resolved:
            raise FutureError("Future is already resolved")
        self.res = value
        self._resolved = True
        self.make_callback('resolved', value)

    def add_callback(self, name, fn, *args, **kwargs):
        super(Future, self).add_callback(name, fn, *args, **kwargs)
        if name == 'resolved' and self._resolved:
            fn(self, self.res, *args, **kwargs)

    def get_value(self):
        if not self._resolved:
            raise FutureError("Future has no value yet")
        return self.res


def resolved(value, data=None):
    """Return a Future that already holds `value`."""
    future = Future(data=data)
    future.resolve(value)
    return future

#END
