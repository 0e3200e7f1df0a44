import pytest

from hostlore.types import Category, Host, HostInfo

a = Host(fqdn="a.example.com")
b = Host(fqdn="b.example.com", primary=True)
c = Host(fqdn="c.example.com", primary=True)

def test_has_value():
    assert a.has_value()
    assert not Host(fqdn="").has_value()

def test_primary_host_flagged():
    assert Category(hosts=(a, b)).primary_host() is b

def test_primary_host_first_flagged_wins():
    assert Category(hosts=(a, c, b)).primary_host() is c

def test_primary_host_fallback_to_first():
    assert Category(hosts=(a, Host(fqdn="d.example.com"))).primary_host() is a

def test_primary_host_empty():
    assert Category().primary_host() is None

def test_get_host():
    cat = Category(hosts=(a, b))
    assert cat.get_host("b.example.com") is b
    assert cat.get_host("nonexistent.example.com") is None

def test_host_at():
    cat = Category(hosts=(a, b, c))
    for i, h in enumerate(cat.hosts):
        assert cat.host_at(i) is h
    with pytest.raises(IndexError, match=r"out of range \(0-2\)"):
        cat.host_at(3)
    with pytest.raises(IndexError):
        cat.host_at(-1)
    with pytest.raises(IndexError, match=r"category has no hosts"):
        Category().host_at(0)

def test_hosts_are_immutable():
    with pytest.raises(AttributeError):
        a.fqdn = "other.example.com" # type: ignore[misc]

def test_host_info_categories():
    info = HostInfo(id="db", types={
        "wal": Category(hosts=(a,)),
        "master": Category(primary=True, hosts=(c, b)),
    })
    assert info.category_names() == ["master", "wal"]
    assert info.primary_category() == "master"

def test_host_info_without_primary_category():
    info = HostInfo(id="db", types={"wal": Category(hosts=(a,))})
    assert info.primary_category() is None
