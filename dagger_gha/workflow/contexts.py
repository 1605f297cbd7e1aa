"""Keys of the ``github`` context, available as ``${{ github.KEY }}``.

See https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/contexts#github-context
"""

from typing import Tuple

# (key, description) in documentation order
GITHUB_CONTEXT_KEYS: Tuple[Tuple[str, str], ...] = (
    ("action", "Name of the running action, or id of the current step"),
    ("action_path", "Path of the action; composite actions only"),
    ("action_ref", "Ref of the action being executed, e.g. v2"),
    ("action_repository", "Owner and repository of the action being executed"),
    ("action_status", "Current result of a composite action"),
    ("actor", "User that triggered the initial workflow run"),
    ("actor_id", "Account ID of the user that triggered the initial run"),
    ("api_url", "URL of the GitHub REST API"),
    ("base_ref", "Target branch of the pull request"),
    ("env", "Path of the file setting environment variables from workflow commands"),
    ("event_name", "Name of the event that triggered the run"),
    ("event_path", "Path of the file holding the full event webhook payload"),
    ("graphql_url", "URL of the GitHub GraphQL API"),
    ("head_ref", "Source branch of the pull request"),
    ("job", "job_id of the current job"),
    ("path", "Path of the file setting PATH from workflow commands"),
    ("ref", "Fully-formed ref of the branch or tag that triggered the run"),
    ("ref_name", "Short ref name of the branch or tag that triggered the run"),
    ("ref_protected", "true if branch protections or rulesets apply to the ref"),
    ("ref_type", "Type of ref that triggered the run: branch or tag"),
    ("repository", "Owner and repository name, e.g. octocat/Hello-World"),
    ("repository_id", "ID of the repository"),
    ("repository_owner", "Username of the repository owner"),
    ("repository_owner_id", "Account ID of the repository owner"),
    ("repositoryUrl", "Git URL of the repository"),
    ("retention_days", "Days workflow run logs and artifacts are kept"),
    ("run_id", "Unique number of each workflow run within a repository"),
    ("run_number", "Unique number of each run of a particular workflow"),
    ("run_attempt", "Unique number of each attempt of a particular run"),
    ("secret_source", "Source of a secret: None, Actions, Codespaces or Dependabot"),
    ("server_url", "URL of the GitHub server"),
    ("sha", "Commit SHA that triggered the workflow"),
    ("token", "Token authenticating on behalf of the GitHub App"),
    ("triggering_actor", "User that initiated the workflow run"),
    ("workflow", "Name of the workflow"),
    ("workflow_ref", "Ref path of the workflow file"),
    ("workflow_sha", "Commit SHA of the workflow file"),
    ("workspace", "Default working directory of steps on the runner"),
)


def github_env_name(key: str) -> str:
    """Environment variable mirroring a context key: github.ref -> GITHUB_REF."""
    return "GITHUB_" + key.upper()


def github_expression(key: str) -> str:
    return f"${{{{ github.{key} }}}}"


def secret_expression(name: str) -> str:
    return f"${{{{ secrets.{name} }}}}"
