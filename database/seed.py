"""
Database seed data.
Initial resource pool for fresh database installations.
"""


def seed_database(db):
    """Insert initial seed data."""

    resources_data = [
        # (type, name, category, capacity, price_member, price_guest)
        ('room', '101', 'Studio', 2, '8000', '12000'),
        ('room', '102', 'Studio', 2, '8000', '12000'),
        ('room', '201', 'Deluxe', 3, '12000', '18000'),
        ('room', '301', 'Suite', 4, '20000', '30000'),
        ('hall', 'Banquet Hall', 'Banquet', 300, '150000', '250000'),
        ('hall', 'Conference Room', 'Conference', 40, '40000', '60000'),
        ('lawn', 'Main Lawn', 'Lawn', 500, '200000', '320000'),
        ('lawn', 'Garden Lawn', 'Lawn', 150, '90000', '140000'),
    ]

    for resource_type, name, category, capacity, price_member, price_guest in resources_data:
        db.execute('''
            INSERT INTO resources
            (resource_type, name, category, capacity, price_member, price_guest)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (resource_type, name, category, capacity, price_member, price_guest))
