"""Git operations module.

- Repository / clone: working copy operations (HEAD, tags, push)
- load_credential: SSH key handle used for clone and push
- classify_remote_failure: tell auth failures from network failures

Usage:
    from reltag.git import Repository, load_credential

    credential = load_credential(key_path).unwrap()
    repo = Repository(Path("/tmp/project"))
    report = repo.push("origin", ["refs/tags/*:refs/tags/*"], env=credential.git_env(os.environ))
"""

from reltag.git.credentials import (
    CredentialError,
    SshCredential,
    load_credential,
)
from reltag.git.repository import (
    GitError,
    ProgressCallback,
    PushedRef,
    PushReport,
    Repository,
    Signature,
    TagRef,
    clone,
    parse_push_porcelain,
)
from reltag.git.transport import (
    RemoteFailure,
    classify_remote_failure,
    is_destination_conflict,
)

__all__ = [
    # credentials
    "CredentialError",
    "SshCredential",
    "load_credential",
    # repository
    "GitError",
    "ProgressCallback",
    "PushReport",
    "PushedRef",
    "Repository",
    "Signature",
    "TagRef",
    "clone",
    "parse_push_porcelain",
    # transport
    "RemoteFailure",
    "classify_remote_failure",
    "is_destination_conflict",
]
