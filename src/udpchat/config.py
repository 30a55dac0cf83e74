""" Runtime defaults for udpchat. Every value here can be overridden by an
    environment variable of the form ``UDPCHAT_<NAME>``, for example
    ``UDPCHAT_PORT=9000``. The environment is consulted every time a value
    is requested, so tests and embedding applications can adjust behavior
    without reloading anything.
"""

import os


defaults = dict()
defaults['host'] = 'localhost'
defaults['port'] = 9876
defaults['timeout'] = 15.0
defaults['fixed_key'] = 'LoginKey9'
defaults['max_datagram'] = 65507
defaults['poll'] = 1.0
defaults['push_ttl'] = 60.0


def variable(name):
    """ Return the name of the environment variable that overrides the
        default value for *name*.
    """

    return 'UDPCHAT_' + name.upper()


def get(name):
    """ Return the configured value for *name*. The environment override,
        if any, is cast to the same type as the built-in default; a value
        that cannot be cast raises :class:`ValueError`.
    """

    default = defaults[name]
    env_name = variable(name)

    try:
        raw = os.environ[env_name]
    except KeyError:
        return default

    cast = type(default)

    try:
        value = cast(raw)
    except ValueError:
        raise ValueError("%s=%r is not a valid %s" % (env_name, raw, cast.__name__))

    if cast is str and value == '':
        raise ValueError(env_name + ' is set but empty')

    return value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
