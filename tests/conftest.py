import pytest


@pytest.fixture
def make_scope():
    """Build a DeclarationScope from a list of front-end declaration dicts."""
    from apitypings.frontend.load import scope_from_dump

    def _make(decls, *, path="example.com/sdk", name=None, comments=(), foreign=None, file="types.go"):
        obj = {
            "path": path,
            "name": name or path.rsplit("/", 1)[-1],
            "files": [{"name": file, "comments": list(comments)}],
            "decls": [{"file": file, **d} for d in decls],
        }
        if foreign:
            obj["foreign"] = foreign
        return scope_from_dump(obj)

    return _make
