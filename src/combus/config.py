""" Process-wide settings for the control bus. Every setting is resolved
    once, from an explicit argument, an environment variable, or a built-in
    default, in that order of preference; the result is cached so that the
    whole process agrees on one value.
"""

import os
import socket


def source(default=None):
    """ Return the identity this process uses as the *source* of any message
        it sends. This defaults to ``<hostname>:<pid>``, but can be overridden
        by calling this method with a string, or by setting the
        ``COMBUS_SOURCE`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)

        if default == '':
            raise ValueError('the source identity cannot be empty')

        os.environ['COMBUS_SOURCE'] = default
        source.found = default


    found = source.found

    if found is not None:
        return found

    try:
        found = os.environ['COMBUS_SOURCE']
    except KeyError:
        found = '%s:%d' % (socket.gethostname(), os.getpid())

    source.found = found
    return found

source.found = None



def transport(default=None):
    """ Return the name of the transport backend used to move encoded frames
        between endpoints. The only backend shipped here is ``zmq``; it can
        be selected explicitly, or via the ``COMBUS_TRANSPORT`` environment
        variable.
    """

    if default is not None:
        transport.found = str(default)

    found = transport.found

    if found is not None:
        return found

    found = os.environ.get('COMBUS_TRANSPORT', 'zmq')
    transport.found = found
    return found

transport.found = None



def port_range(minimum=None, maximum=None):
    """ Return a (minimum, maximum) tuple describing the range of TCP ports
        a publishing endpoint will try to bind. The range can be set here,
        or via the ``COMBUS_PORT_MIN`` and ``COMBUS_PORT_MAX`` environment
        variables.
    """

    if minimum is not None or maximum is not None:
        current = port_range.found

        if current is None:
            current = _port_range_environment()

        if minimum is None:
            minimum = current[0]
        if maximum is None:
            maximum = current[1]

        minimum = int(minimum)
        maximum = int(maximum)

        if minimum < 1 or maximum > 65535 or minimum > maximum:
            raise ValueError('invalid port range: %d-%d' % (minimum, maximum))

        port_range.found = (minimum, maximum)


    found = port_range.found

    if found is not None:
        return found

    found = _port_range_environment()
    port_range.found = found
    return found

port_range.found = None



def _port_range_environment():

    minimum = os.environ.get('COMBUS_PORT_MIN', 10139)
    maximum = os.environ.get('COMBUS_PORT_MAX', 13679)

    return (int(minimum), int(maximum))


def reset():
    """ Forget any cached settings. Intended for test suites that adjust
        the environment between cases.
    """

    source.found = None
    transport.found = None
    port_range.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
