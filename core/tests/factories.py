from core.models import User, Profile, BloodRequest

PASSWORD = 'Str0ng!Passw0rd'


def make_account(email, *, type='donor', name=None, blood_type='O+', password=PASSWORD,
                 contact='555-0100', address='1 Main Street'):
    user = User.objects.create_user(username=email, email=email, password=password)
    profile = Profile.objects.create(
        user=user,
        type=type,
        name=name or email.split('@')[0],
        contact=contact,
        address=address,
        blood_type=blood_type,
    )
    return user, profile


def make_request(hospital_profile, **fields):
    values = {
        'blood_type': 'O-',
        'units_needed': 2,
        'urgency_level': 'medium',
        'status': 'active',
        'description': '',
    }
    values.update(fields)
    return BloodRequest.objects.create(hospital=hospital_profile, **values)
