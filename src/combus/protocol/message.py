""" A class representation of a control bus message. Concrete messages are
    defined in :mod:`combus.protocol.catalogue`; this module provides the
    envelope they all share.
"""

import copy
import itertools
import threading
import time as timemodule

from .. import config
from ..document import Document
from . import fields
from .facets import Decoded


class Message:
    """ The :class:`Message` is the envelope common to every message on the
        bus. It owns the type tag, which is fixed per class and used by the
        receiving side to pick the right class before decoding, and the
        transport-level identity fields: the *source* that sent it, the
        *time* it was created, and an *id* unique to this process.

        The payload is made of zero or more facets, declared in order by the
        *facets* class attribute as (attribute, facet class) pairs. Each
        instance holds its own facet instances; nothing is shared between
        messages, and values passed as keyword arguments are copied.
        Keyword arguments named after a facet attribute set that facet.
        For messages with a single facet, any other keyword arguments are
        used to construct it, so that::

            RunStatusMessage(recording=True, run_number=4821, timestamp=1700000000)

        is equivalent to::

            RunStatusMessage(status=RunStatus(True, 4821, 1700000000))

        :ivar type_tag: The integer identifying this message type on the wire.
        :ivar facets: The (attribute, facet class) pairs making up the payload.
    """

    type_tag = None
    facets = ()

    def __init__(self, source=None, time=None, id=None, **kwargs):

        if self.type_tag is None:
            raise TypeError(type(self).__name__ + ' does not define a type tag')

        if source is None:
            source = config.source()

        if time is None:
            time = timemodule.time()

        if id is None:
            id = _id_next()

        self.source = source
        self.time = time
        self.id = id

        for attribute, facet in self.facets:
            setattr(self, attribute, facet())

        self._assign(kwargs)


    def _assign(self, kwargs):

        loose = dict()
        named = set(attribute for attribute, facet in self.facets)

        for key, value in kwargs.items():
            value = copy.deepcopy(value)

            if key in named:
                setattr(self, key, value)
            else:
                loose[key] = value

        if not loose:
            return

        if len(self.facets) != 1:
            raise TypeError('unexpected keyword arguments for %s: %s' % (type(self).__name__, ', '.join(sorted(loose))))

        attribute, facet = self.facets[0]
        setattr(self, attribute, facet(**loose))


    def __eq__(self, other):
        if type(self) is type(other):
            return vars(self) == vars(other)
        return NotImplemented


    def __repr__(self):
        contents = ', '.join('%s=%r' % (key, value) for key, value in vars(self).items())
        return '%s(%s)' % (type(self).__name__, contents)


    def encode(self, node=None):
        """ Write this message into *node*, or into a new
            :class:`~combus.document.Document` if none is provided, and
            return the document. The envelope is written first, then each
            facet in declared order, then any message-specific scalars.
            Every facet is validated first; if one raises
            :class:`~combus.protocol.errors.InvalidKey`, *node* is left
            untouched.
        """

        for attribute, facet in self.facets:
            getattr(self, attribute).validate()

        if node is None:
            node = Document()

        fields.STRING.put(node, 'envelope.source', self.source)
        fields.FLOAT.put(node, 'envelope.time', self.time)
        fields.STRING.put(node, 'envelope.id', self.id)

        for attribute, facet in self.facets:
            getattr(self, attribute).encode(node)

        self.write_fields(node)
        return node


    def read(self, node, issues=None):
        """ Replace the contents of this message with what is found in
            *node*, in the same order :func:`encode` writes them. Missing
            or malformed content never raises an exception; sections that
            fell back to their defaults are appended to *issues*, if
            provided.
        """

        if issues is None:
            issues = list()

        self.source = fields.STRING.get(node, 'envelope.source')
        self.time = fields.FLOAT.get(node, 'envelope.time')
        self.id = fields.STRING.get(node, 'envelope.id')

        for attribute, facet in self.facets:
            setattr(self, attribute, facet.read(node, issues))

        self.read_fields(node)


    def write_fields(self, node):
        """ Write any scalars that belong to the message itself rather
            than to a facet. The default is to write nothing.
        """

        pass


    def read_fields(self, node):
        pass


    @classmethod
    def try_decode(cls, node):
        """ Construct a new instance from *node*. Returns a
            :class:`~combus.protocol.facets.Decoded` pair of the message and
            the list of sections that could not be read.
        """

        issues = list()
        message = cls()
        message.read(node, issues)
        return Decoded(message, issues)


    @classmethod
    def decode(cls, node):
        return cls.try_decode(node).value


# end of class Message



class SimpleMessage(Message):
    """ A marker message: the envelope and type tag are the entire message.
    """

    facets = ()


# end of class SimpleMessage


_id_min = 0
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next message identification number, as a hex string.
        The numbers are only unique within this process; combined with the
        message source they identify a message on the bus.
    """

    global _id_ticker

    with _id_lock:
        id = next(_id_ticker)

        if id >= _id_max:
            _id_ticker = itertools.count(_id_min)

            if id > _id_max:
                id = next(_id_ticker)

    return '%08x' % (id)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
