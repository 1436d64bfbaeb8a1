""" Asset category names. The service identifies asset categories by opaque
    UUID tags; the table here maps the handful that have been identified to
    readable names, and back. It is process-wide and read-only; tests may
    substitute their own with :func:`use`.
"""

import logging
import re


logger = logging.getLogger(__name__)

UUID = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.IGNORECASE)

KNOWN = {
    '47ef914c-ad5b-4248-ae86-d73d1369c009': 'class_assault',
    '49e59f6a-8eb7-4f27-a9e9-8c375b4af5eb': 'class_engineer',
    '835aa100-f265-4065-bc6c-8376bfbda606': 'class_recon',
    '74398fcc-a02e-4aee-b830-ac9cd400c837': 'class_support',
    '0f72e98a-53b7-4380-9435-263b621d11d2': 'vehicle_kht',
    'd9a88985-e856-4825-8c1f-5a2aadfc8840': 'vehicle_su57',
    '95ec6560-1be8-40cc-af70-b9db59375dc1': 'vehicle_f61v',
}


def is_uuid(tag):
    return isinstance(tag, str) and UUID.match(tag) is not None



class CategoryTable:
    """ Bidirectional mapping between asset category UUIDs and names. Both
        directions are case-insensitive.
    """

    def __init__(self, names):
        self.names = dict()
        self.uuids = dict()

        for uuid,name in names.items():
            self.names[uuid.lower()] = name
            self.uuids[name.lower()] = uuid.lower()

        self.unmapped = set()


    def name(self, uuid):
        """ Return the readable name for *uuid*, or *uuid* itself if it is not
            in the table. Each unknown UUID is logged once.
        """

        lower = uuid.lower()
        try:
            return self.names[lower]
        except KeyError:
            pass

        if lower not in self.unmapped:
            self.unmapped.add(lower)
            logger.info("Unmapped asset category UUID: %s", lower)

        return uuid


    def uuid(self, name):
        """ Return the UUID for *name*. A value that already looks like a UUID
            is returned unchanged; an unknown name returns None.
        """

        if is_uuid(name):
            return name
        return self.uuids.get(name.lower())


    def __contains__(self, name):
        return self.uuid(name) is not None


    def __len__(self):
        return len(self.names)

# end of class CategoryTable



def table():
    """ Return the process-wide :class:`CategoryTable`.
    """

    if table.current is None:
        table.current = CategoryTable(KNOWN)
    return table.current

table.current = None



def use(replacement):
    """ Substitute *replacement* for the process-wide table and return the
        one it displaces. Passing None restores the built-in table on next
        use.
    """

    previous = table.current
    table.current = replacement
    return previous


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
