from loopgram.core.logger import LoopgramLogger

logger = LoopgramLogger.get_logger()


def is_for_this_bot(explicit_username: str | None, configured_username: str | None) -> bool:
    """Decide whether a command addressed as ``/cmd@<explicit_username>`` is ours.

    A command without a username suffix is assumed to be for us.  With a
    suffix it is ours only if it equals (case-sensitively) the configured
    username; if no username is configured, addressed commands are never ours.
    """
    if explicit_username is None:
        return True
    if configured_username is None:
        logger.debug(
            "Addressed command received but no username is configured",
            extra={"explicit_username": explicit_username},
        )
        return False
    return explicit_username == configured_username
