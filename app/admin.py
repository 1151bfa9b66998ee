from typing import Optional, Sequence

from pydantic import BaseModel

from app.config import CommandType, StoreConfig
from app.contracts.game import ConfigStore
from app.logging_config import get_logger
from app.reporter import MessageKey, OutcomeReporter


logger = get_logger(__name__)


class AdminResult(BaseModel):
    config: StoreConfig
    message: str
    changed: bool = False


def rotate_secret(
    config: StoreConfig,
    args: Sequence[str],
    privileged: bool,
    store: ConfigStore,
    actor: Optional[str] = None,
    reporter: Optional[OutcomeReporter] = None,
) -> AdminResult:
    """
    Replace the store API key. ``privileged`` comes from the host's permission check.
    """
    reporter = reporter or OutcomeReporter()
    if not privileged:
        return AdminResult(config=config, message=reporter.format_message(MessageKey.PERMISSION_DENIED))
    if len(args) != 1:
        return AdminResult(
            config=config,
            message=reporter.format_message(MessageKey.USAGE_ERROR, config.secret_command),
        )

    updated = config.model_copy(update={"api_key": args[0]})
    store.save(updated)
    logger.warning("Store secret key has been updated by %s.", actor or "RCON")
    return AdminResult(config=updated, message=reporter.format_message(MessageKey.SECRET_UPDATED), changed=True)


def rename_command(
    config: StoreConfig,
    args: Sequence[str],
    privileged: bool,
    store: ConfigStore,
    actor: Optional[str] = None,
    reporter: Optional[OutcomeReporter] = None,
) -> AdminResult:
    """
    Rename the claim or secret command alias: ``args`` is ``[<claim|secret>, <newname>]``.
    """
    reporter = reporter or OutcomeReporter()
    if not privileged:
        return AdminResult(config=config, message=reporter.format_message(MessageKey.PERMISSION_DENIED))
    if len(args) != 2:
        return AdminResult(config=config, message=reporter.format_message(MessageKey.SET_COMMAND_USAGE))

    command_type, new_name = args[0].lower(), args[1].lower()
    try:
        target = CommandType(command_type)
    except ValueError:
        return AdminResult(config=config, message=reporter.format_message(MessageKey.INVALID_COMMAND_TYPE))

    field = "claim_command" if target == CommandType.CLAIM else "secret_command"
    updated = config.model_copy(update={field: new_name})
    store.save(updated)
    logger.warning("%s command has been updated to /%s by %s.", target.value, new_name, actor or "RCON")
    return AdminResult(
        config=updated,
        message=reporter.format_message(MessageKey.COMMAND_UPDATED, target.value, new_name),
        changed=True,
    )
