''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps` for frames
    put on the control bus.
'''

# The libraries are imported conditionally so that a deployment without
# msgspec still encodes frames identically; only the speed differs. All
# three produce the same compact JSON for the plain strings and lists a
# :class:`combus.document.Document` converts to.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# msgspec encodes to bytes, as does orjson.dumps. Frames are always bytes,
# so the standard library variant is made to agree.

def json_dumps(*args, **kwargs):
    kwargs.setdefault('separators', (',', ':'))
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = json.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
