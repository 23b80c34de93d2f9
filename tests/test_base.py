import pytest

from clients.base import Commit, Signature

RAW_COMMIT = (
    "tree 4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"
    "parent 1111111111111111111111111111111111111111\n"
    "author Jane Doe <jane@example.com> 1700000000 +0100\n"
    "committer John Roe <john@example.com> 1700000100 -0500\n"
    "gpgsig -----BEGIN PGP SIGNATURE-----\n"
    " \n"
    " abcdef\n"
    " -----END PGP SIGNATURE-----\n"
    "\n"
    "KDB-42 did thing\n"
    "\n"
    "Longer body.\n"
)


def test_signature_parse():
    signature = Signature.parse("Jane Q. Doe <jane@example.com> 1700000000 +0100\n")

    assert signature == Signature("Jane Q. Doe", "jane@example.com", 1700000000, "+0100")
    assert str(signature) == "Jane Q. Doe <jane@example.com>"


def test_signature_parse_rejects_malformed_ident():
    with pytest.raises(ValueError):
        Signature.parse("Jane Doe jane@example.com")


def test_signature_env():
    env = Signature("Jane", "jane@example.com", 1700000000, "-0230").env("COMMITTER")

    assert env == {
        "GIT_COMMITTER_NAME": "Jane",
        "GIT_COMMITTER_EMAIL": "jane@example.com",
        "GIT_COMMITTER_DATE": "1700000000 -0230",
    }


def test_commit_parse_skips_signature_block():
    commit = Commit.parse("f" * 40, RAW_COMMIT)

    assert commit.tree == "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
    assert commit.parents == ("1" * 40,)
    assert commit.author.name == "Jane Doe"
    assert commit.committer == Signature("John Roe", "john@example.com", 1700000100, "-0500")
    assert commit.message == "KDB-42 did thing\n\nLonger body.\n"
    assert commit.summary == "KDB-42 did thing"


def test_commit_repr_shows_id_and_summary():
    commit = Commit.parse("f" * 40, RAW_COMMIT)

    assert repr(commit) == f"Commit {{ id: {'f' * 40}, summary: 'KDB-42 did thing' }}"


def test_commit_parse_requires_tree_and_people():
    with pytest.raises(ValueError):
        Commit.parse("f" * 40, "parent abc\n\nmessage")
