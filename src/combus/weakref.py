""" Weak references to frame callbacks. A subscriber never keeps its
    callbacks alive: once the owner of a callback goes away, the callback is
    quietly dropped the next time a frame arrives.
"""

import logging
import weakref

logger = logging.getLogger(__name__)


def ref(callback):
    """ Return a weak reference to *callback*. Bound methods, such as
        ``bus.dispatch``, are referenced through :class:`weakref.WeakMethod`
        so that the reference follows the lifetime of the instance rather
        than that of the short-lived method object.
    """

    try:
        callback.__func__
        callback.__self__
    except AttributeError:
        return weakref.ref(callback)
    else:
        return weakref.WeakMethod(callback)


class Callbacks:
    """ An ordered collection of weakly referenced callbacks, all invoked
        with the same frame. An exception from one callback is logged and
        does not prevent the others from running.
    """

    def __init__(self):
        self.references = list()


    def __len__(self):
        return len(self.references)


    def add(self, callback):

        if not callable(callback):
            raise TypeError('callback must be callable')

        self.references.append(ref(callback))


    def __call__(self, frame):

        invalid = list()

        for reference in tuple(self.references):
            callback = reference()

            if callback is None:
                invalid.append(reference)
                continue

            try:
                callback(frame)
            except Exception:
                logger.exception('callback failed for received frame')

        for reference in invalid:
            self.references.remove(reference)


# end of class Callbacks


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
