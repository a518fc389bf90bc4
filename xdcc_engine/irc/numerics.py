"""Numeric replies interpreted by the session."""

RPL_WELCOME = "001"
RPL_NAMREPLY = "353"
RPL_ENDOFNAMES = "366"

ERR_NOSUCHNICK = "401"
ERR_NOSUCHCHANNEL = "403"
ERR_TOOMANYCHANNELS = "405"
ERR_ERRONEUSNICKNAME = "432"
ERR_NICKNAMEINUSE = "433"
ERR_NICKCOLLISION = "436"
ERR_UNAVAILRESOURCE = "437"
ERR_PASSWDMISMATCH = "464"
ERR_YOUREBANNEDCREEP = "465"
ERR_CHANNELISFULL = "471"
ERR_INVITEONLYCHAN = "473"
ERR_BANNEDFROMCHAN = "474"
ERR_BADCHANNELKEY = "475"
ERR_BADCHANMASK = "476"
ERR_NEEDREGGEDNICK = "477"
ERR_SECUREONLYCHAN = "489"

# Answered by picking a fresh nickname.
NICKNAME_REJECTIONS = frozenset(
    {ERR_ERRONEUSNICKNAME, ERR_NICKNAMEINUSE, ERR_NICKCOLLISION, ERR_UNAVAILRESOURCE}
)

# Registration cannot succeed on this connection.
REGISTRATION_FAILURES = frozenset({ERR_PASSWDMISMATCH, ERR_YOUREBANNEDCREEP})

JOIN_REJECTIONS = frozenset(
    {
        ERR_NOSUCHCHANNEL,
        ERR_TOOMANYCHANNELS,
        ERR_CHANNELISFULL,
        ERR_INVITEONLYCHAN,
        ERR_BANNEDFROMCHAN,
        ERR_BADCHANNELKEY,
        ERR_BADCHANMASK,
        ERR_NEEDREGGEDNICK,
        ERR_SECUREONLYCHAN,
    }
)
