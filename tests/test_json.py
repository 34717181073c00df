import json
import combus


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_combus_encode_and_decode():
    encode_and_decode(combus.json.dumps, combus.json.loads)


def test_document_survives_json():

    document = combus.Document()
    document.put('envelope.source', 'dasmon')
    document.add_child('rules.rule', combus.Document()).put('fact', 'f1')
    document.add_child('rules.rule', combus.Document()).put('fact', 'f2')
    document.put_child('facts', combus.Document()).push_back('', combus.Document('a'))

    encoded = combus.json.dumps(document.to_python())
    assert isinstance(encoded, bytes)

    decoded = combus.Document.from_python(combus.json.loads(encoded))
    assert decoded == document


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['pairs'] = [['rule', [['fact', 'f1']]], ['', 'x']]
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    # Whitespace handling varies between the JSON libraries, so only the
    # decoded result is compared.

    decoded = loads(encoded)
    assert isinstance(decoded, dict)
    assert decoded == input_dictionary


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
