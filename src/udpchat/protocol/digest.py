""" Character-frequency fingerprints.

    The fingerprint is a multiset of the characters in a payload. It catches
    a datagram that was corrupted, truncated, or decoded with the wrong key;
    it does not catch a rearrangement of the same characters, and it is not
    meant to.
"""

import collections
import logging

log = logging.getLogger(__name__)


def fingerprint(text):
    """ Count every character in *text*, whitespace and punctuation included.
        None and the empty string both yield an empty dictionary.
    """

    if not text:
        return dict()

    return dict(collections.Counter(text))


def equal_fingerprints(first, second):
    """ Structural equality of two fingerprints. A missing fingerprint is the
        same as an empty one; an entry with a zero count is still an entry.
    """

    if first is None:
        first = dict()
    if second is None:
        second = dict()

    return dict(first) == dict(second)


def parse_frequencies(raw):
    """ Normalize a fingerprint received from the remote side. Entries whose
        key is not exactly one character, or whose count is not an integer,
        are dropped with a warning; the comparison that follows will then
        fail on its own.
    """

    parsed = dict()

    if not raw:
        return parsed

    for key,count in raw.items():
        if not isinstance(key, str) or len(key) != 1:
            log.warning("Invalid frequency key (not a single character): %r", key)
            continue

        # bool is an int subclass; a count of True is still garbage.

        if isinstance(count, bool) or not isinstance(count, int):
            log.warning("Invalid frequency value for key %r: %r", key, count)
            continue

        parsed[key] = count

    return parsed


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
