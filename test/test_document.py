import os
import pytest

from hostlore.document import DecodeError, decode_document, load_document
from hostlore.types import Host
from hostlore.utils import as_key

repos = os.path.join(os.path.dirname(__file__), "repos")
db_yaml = os.path.join(repos, "cluster3", "db.yaml")

def test_as_key():
    assert as_key("master.yaml") == "master"
    assert as_key("/srv/repos/cluster6") == "cluster6"
    assert as_key("/srv/repos/cluster6/") == "cluster6"
    assert as_key("/srv/repos/_repo.yaml") == "_repo"
    assert as_key("Master.YAML") == "Master.YAML"

def test_load_sample_document():
    info = load_document(db_yaml)
    assert info.id == "db"
    assert info.path == db_yaml
    assert info.type == "host"
    assert info.summary == "PostgreSQL database machines"
    assert info.category_names() == ["master", "ro", "standby", "task", "wal"]
    assert str(info) == "H: db (5)"

    master = info.types["master"]
    assert master.primary
    assert master.hosts == (Host(fqdn="db1.cluster6.company.net", primary=True),)

    ro = info.types["ro"]
    assert len(ro.hosts) == 4
    assert ro.hosts[3] == Host(fqdn="db4.cluster3.company.net", kind="longquery", primary=True, summary="Designated for long queries")

    assert len(info.types["wal"].hosts) == 1

    standby = info.types["standby"]
    assert [h.fqdn for h in standby.hosts] == ["db8.cluster3.company.net", "db1.cluster3.company.net"]
    assert standby.hosts[0].primary
    assert standby.hosts[1].kind == "disaster"

    assert len(info.types["task"].hosts) == 2

def test_document_primary_category():
    info = load_document(db_yaml)
    assert info.primary_category() == "master"

def test_empty_document():
    info = decode_document(b"", "/srv/repos/infra/_repo.yaml")
    assert info.id == "_repo"
    assert info.types == {}
    assert info.type == ""
    assert info.primary_category() is None

def test_unknown_keys_are_ignored():
    info = decode_document(b"type: host\nowner: ops\ntypes:\n  a:\n    color: red\n    hosts:\n      - fqdn: a.example.com\n        rack: 4\n", "x.yaml")
    assert info.types["a"].hosts == (Host(fqdn="a.example.com"),)

def test_invalid_yaml():
    with pytest.raises(DecodeError, match=r"invalid yaml") as e:
        decode_document(b"types: [unclosed", "broken.yaml")
    assert e.value.loc == "broken.yaml"

def test_document_not_a_mapping():
    with pytest.raises(DecodeError, match=r"document must be a mapping, not list"):
        decode_document(b"- a\n- b\n", "list.yaml")

def test_hosts_not_a_list():
    with pytest.raises(DecodeError, match=r"`types.master.hosts` must be of type list, not str"):
        load_document(os.path.join(repos, "cluster3", "broken.yaml"))

def test_missing_fqdn():
    with pytest.raises(DecodeError, match=r"`types.a.hosts\[1\]` must define a non-empty fqdn"):
        decode_document(b"types:\n  a:\n    hosts:\n      - fqdn: a.example.com\n      - summary: nameless\n", "x.yaml")

def test_wrong_scalar_types():
    with pytest.raises(DecodeError, match=r"`types.a.primary` must be of type bool, not str"):
        decode_document(b"types:\n  a:\n    primary: sometimes\n", "x.yaml")
    with pytest.raises(DecodeError, match=r"`summary` must be of type str, not int"):
        decode_document(b"summary: 42\n", "x.yaml")
    with pytest.raises(DecodeError, match=r"category name 7 must be of type str"):
        decode_document(b"types:\n  7:\n    hosts: []\n", "x.yaml")

def test_decode_error_location():
    e = DecodeError("bad", loc="some/file.yaml")
    assert str(e) == "some/file.yaml: bad"
