""" A small hierarchical document, modelled on a property tree, used as the
    schemaless body of every control bus message. A :class:`Document` node
    holds a scalar string and an ordered sequence of named children; names
    may repeat, and may be empty, which is how lists are represented.

    Paths are child names joined by :data:`separator`. The empty path refers
    to the node itself.
"""

separator = '.'


class DocumentPathError(KeyError):
    """ The requested path does not exist in the document.
    """


class Document:
    """ One node in a hierarchical document. The *data* attribute is the
        scalar value of the node, always a string; *children* is a list of
        (name, :class:`Document`) tuples in insertion order.
    """

    def __init__(self, data=''):
        self.data = render(data)
        self.children = list()


    def __eq__(self, other):
        if isinstance(other, Document):
            return self.data == other.data and self.children == other.children
        return NotImplemented


    def __iter__(self):
        return iter(self.children)


    def __len__(self):
        return len(self.children)


    def __repr__(self):
        return 'Document(%r)' % (self.to_python(),)


    def _find(self, name):
        for child_name, child in self.children:
            if child_name == name:
                return child

        return None


    def _walk(self, names):
        """ Descend through *names*, creating any missing nodes along the
            way. Existing nodes are always matched on their first occurrence.
        """

        node = self

        for name in names:
            child = node._find(name)
            if child is None:
                child = Document()
                node.children.append((name, child))
            node = child

        return node


    def find_child(self, path):
        """ Return the node at *path*, or None if any part of the path is
            missing.
        """

        node = self

        for name in split(path):
            node = node._find(name)
            if node is None:
                return None

        return node


    def get_child(self, path):
        """ Return the node at *path*; raise :class:`DocumentPathError` if
            it does not exist.
        """

        node = self.find_child(path)

        if node is None:
            raise DocumentPathError(path)

        return node


    def get(self, path, default=None):
        """ Return the scalar string stored at *path*, or *default* if the
            path does not exist.
        """

        node = self.find_child(path)

        if node is None:
            return default

        return node.data


    def put(self, path, value):
        """ Store *value* at *path*, creating intermediate nodes as needed
            and overwriting any scalar already present. Returns the node
            that received the value.
        """

        node = self._walk(split(path))
        node.data = render(value)
        return node


    def add_child(self, path, node):
        """ Append *node* at *path*. The final path segment is always added
            as a new child, even if a sibling of the same name already
            exists; this is how repeated records are written.
        """

        names = split(path)

        if not names:
            raise ValueError('cannot add a child at the empty path')

        parent = self._walk(names[:-1])
        parent.children.append((names[-1], node))
        return node


    def put_child(self, path, node):
        """ Store *node* at *path*, replacing the first existing child of
            that name, if any.
        """

        names = split(path)

        if not names:
            raise ValueError('cannot replace the node at the empty path')

        parent = self._walk(names[:-1])
        name = names[-1]

        for index, (child_name, child) in enumerate(parent.children):
            if child_name == name:
                parent.children[index] = (name, node)
                return node

        parent.children.append((name, node))
        return node


    def push_back(self, name, node):
        """ Append *node* as a direct child called *name*, without any
            path interpretation; *name* may be empty.
        """

        self.children.append((name, node))
        return node


    def to_python(self):
        """ Convert this node to JSON-compatible values: a node without
            children becomes its scalar string, a node with children becomes
            a list of [name, value] pairs. The conversion is lossless for
            repeated and unnamed children.
        """

        if not self.children:
            return self.data

        return [[name, child.to_python()] for name, child in self.children]


    @classmethod
    def from_python(cls, value):
        """ The inverse of :func:`to_python`. Dictionaries are accepted as
            well, so that producers emitting plain JSON objects can be read.
            A list is read as [name, value] pairs only if every element is
            a two item list; any other list, such as an array of strings,
            becomes a sequence of unnamed children.
        """

        if isinstance(value, dict):
            node = cls()
            for name, child in value.items():
                node.push_back(str(name), cls.from_python(child))
            return node

        if isinstance(value, (list, tuple)):
            node = cls()

            if all(_is_pair(item) for item in value):
                for name, child in value:
                    node.push_back(str(name), cls.from_python(child))
            else:
                for item in value:
                    node.push_back('', cls.from_python(item))

            return node

        if value is None:
            return cls()

        return cls(value)


# end of class Document



def _is_pair(item):
    return isinstance(item, (list, tuple)) and len(item) == 2


def render(value):
    """ Render a scalar the way it is stored in a :class:`Document`.
        Booleans are spelled 'true' and 'false'; floating point values use
        :func:`repr` so that they survive a round trip exactly.
    """

    if isinstance(value, str):
        return value

    if isinstance(value, bool):
        if value:
            return 'true'
        return 'false'

    if isinstance(value, int):
        return str(int(value))

    if isinstance(value, float):
        return repr(value)

    return str(value)


def split(path):
    """ Break *path* into its component names.
    """

    if path == '':
        return ()

    return tuple(path.split(separator))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
