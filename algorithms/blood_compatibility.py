"""
Blood Type Compatibility Helper
Determines which donor blood groups can donate to which recipient blood groups
(red cell compatibility, donor -> recipient direction)
"""

from algorithms.records import BloodGroup

O_NEG, O_POS = BloodGroup.O_NEG, BloodGroup.O_POS
A_NEG, A_POS = BloodGroup.A_NEG, BloodGroup.A_POS
B_NEG, B_POS = BloodGroup.B_NEG, BloodGroup.B_POS
AB_NEG, AB_POS = BloodGroup.AB_NEG, BloodGroup.AB_POS

# Blood group compatibility matrix: donor -> recipients it can serve
COMPATIBILITY = {
    O_NEG: frozenset({O_NEG, O_POS, A_NEG, A_POS, B_NEG, B_POS, AB_NEG, AB_POS}),  # Universal donor
    O_POS: frozenset({O_POS, A_POS, B_POS, AB_POS}),
    A_NEG: frozenset({A_NEG, A_POS, AB_NEG, AB_POS}),
    A_POS: frozenset({A_POS, AB_POS}),
    B_NEG: frozenset({B_NEG, B_POS, AB_NEG, AB_POS}),
    B_POS: frozenset({B_POS, AB_POS}),
    AB_NEG: frozenset({AB_NEG, AB_POS}),
    AB_POS: frozenset({AB_POS}),  # Universal recipient
}


def is_compatible(donor_group, recipient_group) -> bool:
    """
    Check if a donor blood group can give to a recipient

    Args:
        donor_group: Donor's blood group (e.g., 'O+' or BloodGroup.O_POS)
        recipient_group: Recipient's blood group (e.g., 'A+')

    Returns:
        Boolean: True if compatible, False otherwise

    Raises:
        InvalidBloodGroup: if either value is not one of the 8 groups
    """
    donor = BloodGroup.parse(donor_group)
    recipient = BloodGroup.parse(recipient_group)
    return recipient in COMPATIBILITY[donor]


def is_exact_match(donor_group, recipient_group) -> bool:
    return BloodGroup.parse(donor_group) is BloodGroup.parse(recipient_group)


def get_compatible_donors(recipient_group):
    """
    Get list of blood groups that can donate to recipient

    Args:
        recipient_group: Recipient's blood group

    Returns:
        List of compatible donor blood groups, in table order
    """
    recipient = BloodGroup.parse(recipient_group)
    return [donor for donor, recipients in COMPATIBILITY.items() if recipient in recipients]


def get_compatible_recipients(donor_group):
    """
    Get list of blood groups that can receive from donor

    Args:
        donor_group: Donor's blood group

    Returns:
        List of compatible recipient blood groups
    """
    recipients = COMPATIBILITY[BloodGroup.parse(donor_group)]
    return [group for group in BloodGroup if group in recipients]
