"""Tests for node and attribute models."""

import json

from shock.files import MemoryFile
from shock.schemas import ShockNode, UploadAttributes

FILE = MemoryFile(name='reads.fastq', data=b'0123456789', last_modified=1700000000000)


def test_attributes_for_file():
    attributes = UploadAttributes.for_file(FILE, 4, incomplete='1')

    assert json.loads(attributes.to_json_bytes()) == {
        'incomplete': '1',
        'file_size': '10',
        'file_name': 'reads.fastq',
        'file_time': '1700000000000',
        'chunk_size': '4',
    }


def test_non_string_values_are_stringified():
    attributes = UploadAttributes.model_validate({'file_size': 10, 'chunks': 2, 'file_time': 1700000000000})

    assert attributes.file_size == '10'
    assert attributes.chunks == '2'
    assert attributes.confirmed_chunks() == 2


def test_matches_requires_all_three_keys():
    base = {'file_size': '10', 'file_name': 'reads.fastq', 'file_time': '1700000000000'}

    assert UploadAttributes.model_validate(base).matches(FILE)
    for key, value in (('file_size', '11'), ('file_name', 'other'), ('file_time', '1')):
        assert not UploadAttributes.model_validate({**base, key: value}).matches(FILE)


def test_confirmed_chunks_defaults_to_zero():
    assert UploadAttributes().confirmed_chunks() == 0
    assert UploadAttributes(chunks='garbage').confirmed_chunks() == 0


def test_stored_chunk_size():
    assert UploadAttributes(chunk_size='2097152').stored_chunk_size() == 2097152
    assert UploadAttributes().stored_chunk_size() is None


def test_stored_chunk_size_rejects_non_positive_values():
    assert UploadAttributes(chunk_size='0').stored_chunk_size() is None
    assert UploadAttributes(chunk_size='-4').stored_chunk_size() is None
    assert UploadAttributes(chunk_size='big').stored_chunk_size() is None


def test_confirmed_chunks_is_never_negative():
    assert UploadAttributes(chunks='-1').confirmed_chunks() == 0
    assert UploadAttributes(incomplete_chunks='-3', chunks='2').confirmed_chunks() == 0


def test_counts_use_leading_digits():
    assert UploadAttributes(chunks='3abc').confirmed_chunks() == 3
    assert UploadAttributes(chunks=' 2').confirmed_chunks() == 2
    assert UploadAttributes(chunk_size='4096 bytes').stored_chunk_size() == 4096


def test_extra_attributes_are_kept():
    attributes = UploadAttributes.model_validate({'file_name': 'a', 'project': 'narrative'})
    assert json.loads(attributes.to_json_bytes())['project'] == 'narrative'


def test_node_without_attributes_never_matches():
    node = ShockNode.model_validate({'id': 'n1', 'attributes': None, 'file': {'name': 'x'}})

    assert not node.matches(FILE)
    assert node.model_extra['file'] == {'name': 'x'}
