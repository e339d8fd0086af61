#!/usr/bin/env python
"""
Script to create an admin user and print a bearer token for it.
"""
from flask_jwt_extended import create_access_token

from gym_api import create_app, db
from gym_api.models import User, UserRole

app = create_app()

with app.app_context():
    # Check if admin user already exists
    admin = User.query.filter_by(email='admin@example.com').first()
    
    if not admin:
        admin = User(name='Admin', email='admin@example.com', role=UserRole.ADMIN.value)
        db.session.add(admin)
        db.session.commit()
        print(f'Admin user created with ID: {admin.id}')
    elif admin.role != UserRole.ADMIN.value:
        admin.role = UserRole.ADMIN.value
        db.session.commit()
        print(f'Updated user ID: {admin.id} with admin role')
    else:
        print(f'Admin user already exists with ID: {admin.id}')

    token = create_access_token(identity=str(admin.id), additional_claims={'role': admin.role})
    print(f'Bearer token: {token}')
