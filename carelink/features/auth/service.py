from enum import Enum
from typing import List, Optional
from carelink.features.auth.models import User, Role, STAFF_ID_PREFIXES
from carelink.features.auth.schemas import (
    StaffRegisterRequest,
    PatientProfile,
    PublicPatientRegisterRequest,
    DeliveryPartnerRegisterRequest,
    UserResponse,
)
from carelink.features.hospitals.models import Hospital, HospitalStatus
from carelink.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    generate_temp_password,
)
from carelink.core.email import send_patient_credentials_email, send_staff_welcome_email
from carelink.shared.exceptions import (
    BadRequestException,
    NotFoundException,
    CredentialsException,
    ConflictException,
    ForbiddenException,
)
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class AuthErrorCode(str, Enum):
    EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
    INVALID_EMAIL = "auth/invalid-email"
    WEAK_PASSWORD = "auth/weak-password"
    INVALID_CREDENTIALS = "auth/invalid-credential"
    USER_DISABLED = "auth/user-disabled"
    OPERATION_NOT_ALLOWED = "auth/operation-not-allowed"
    ADMIN_RESTRICTED_OPERATION = "auth/admin-restricted-operation"


AUTH_ERROR_MESSAGES = {
    AuthErrorCode.EMAIL_ALREADY_IN_USE: "This email is already registered. Please use a different email or try logging in.",
    AuthErrorCode.INVALID_EMAIL: "Please enter a valid email address.",
    AuthErrorCode.WEAK_PASSWORD: "Password is too weak. Please use at least 6 characters.",
    AuthErrorCode.INVALID_CREDENTIALS: "Invalid email or password.",
    AuthErrorCode.USER_DISABLED: "This account has been deactivated. Please contact your hospital administrator.",
    AuthErrorCode.OPERATION_NOT_ALLOWED: "Email/password authentication is not enabled. Please contact the administrator.",
    AuthErrorCode.ADMIN_RESTRICTED_OPERATION: "This operation is restricted. Please contact the administrator.",
}

GENERIC_AUTH_ERROR = "An unexpected error occurred. Please try again."


def describe_auth_error(code: Optional[str], detail: Optional[str] = None) -> str:
    """Human-readable message for an authentication error code."""
    try:
        return AUTH_ERROR_MESSAGES[AuthErrorCode(code)]
    except ValueError:
        return detail or GENERIC_AUTH_ERROR


# Roles a hospital admin may create inside their own hospital
HOSPITAL_ADMIN_REGISTRABLE = {Role.DOCTOR, Role.RECEPTIONIST, Role.PHARMACY, Role.NURSE}

# Roles allowed to register patients at the front desk
PATIENT_REGISTRARS = {Role.RECEPTIONIST, Role.HOSPITAL_ADMIN, Role.DOCTOR, Role.NURSE}


class AuthService:
    """Identity and role directory."""

    @staticmethod
    def user_to_response(user: User) -> UserResponse:
        """Convert User document to response schema."""
        return UserResponse(
            uid=user.uid,
            email=user.email,
            role=user.role,
            hospital_id=user.hospital_id,
            patient_id=user.patient_id,
            staff_id=user.staff_id,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            department=user.department,
            specialization=user.specialization,
            is_active=user.is_active,
            is_first_login=user.is_first_login,
            is_admitted=user.is_admitted,
            current_bed_number=user.current_bed_number,
            current_ward=user.current_ward,
            medicine_delivery_type=user.medicine_delivery_type,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    def create_token(user: User) -> str:
        return create_access_token(user.uid, {
            "role": user.role.value,
            "hospital_id": user.hospital_id,
        })

    @staticmethod
    async def build_user(email: str, password: str, role: Role, **profile) -> User:
        """
        Validate and build an unsaved principal.

        Callers that write several documents for one action insert the
        returned user through their cascade; everyone else uses create_user.
        """
        existing_user = await User.find_one(User.email == email)
        if existing_user:
            raise ConflictException(describe_auth_error(AuthErrorCode.EMAIL_ALREADY_IN_USE))

        if len(password) < 6:
            raise BadRequestException(describe_auth_error(AuthErrorCode.WEAK_PASSWORD))

        if role == Role.PATIENT:
            profile.setdefault("patient_id", generate_id("PAT", 3))
        else:
            profile.setdefault("staff_id", generate_id(STAFF_ID_PREFIXES.get(role, "STF"), 2))

        return User(
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            **profile,
        )

    @staticmethod
    async def create_user(email: str, password: str, role: Role, **profile) -> User:
        """Create a principal and return it."""
        user = await AuthService.build_user(email, password, role, **profile)
        await user.insert()
        logger.info(f"Created {role.value} {user.reference_id} ({email})")
        return user

    @staticmethod
    async def authenticate(email: str, password: str) -> tuple[User, str]:
        """
        Authenticate user and return access token.

        Returns:
            tuple: (user, access_token)
        """
        user = await User.find_one(User.email == email)
        if not user or not verify_password(password, user.password_hash):
            raise CredentialsException(describe_auth_error(AuthErrorCode.INVALID_CREDENTIALS))

        if not user.is_active:
            raise CredentialsException(describe_auth_error(AuthErrorCode.USER_DISABLED))

        return user, AuthService.create_token(user)

    @staticmethod
    async def sign_out(user: User) -> None:
        """Tokens are stateless; sign-out is acknowledged and logged only."""
        logger.info(f"User {user.reference_id} signed out")

    @staticmethod
    async def get_hospital(hospital_id: str) -> Hospital:
        hospital = await Hospital.find_one(Hospital.hospital_id == hospital_id)
        if not hospital:
            raise NotFoundException("Hospital not found")
        return hospital

    @staticmethod
    async def register_staff(actor: User, request: StaffRegisterRequest) -> User:
        """
        Register a staff member.

        Hospital admins add doctors, nurses, receptionists and pharmacy staff to
        their own hospital. Super admins may add any staff role, including
        hospital admins, to any hospital.
        """
        if actor.role == Role.HOSPITAL_ADMIN:
            if request.role not in HOSPITAL_ADMIN_REGISTRABLE:
                raise ForbiddenException(f"Hospital admins cannot register {request.role.value} accounts")
            hospital_id = actor.hospital_id
        elif actor.role == Role.SUPER_ADMIN:
            if not request.hospital_id:
                raise BadRequestException("hospital_id is required")
            hospital_id = request.hospital_id
        else:
            raise ForbiddenException(describe_auth_error(AuthErrorCode.ADMIN_RESTRICTED_OPERATION))

        await AuthService.get_hospital(hospital_id)

        user = await AuthService.create_user(
            request.email,
            request.password,
            request.role,
            hospital_id=hospital_id,
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            department=request.department,
            specialization=request.specialization,
            license_number=request.license_number,
            registered_by=actor.uid,
        )

        try:
            await send_staff_welcome_email(user.email, user.full_name, user.staff_id, user.role.value)
        except Exception as e:
            logger.error(f"Failed to send welcome email to {user.email}: {str(e)}")

        return user

    @staticmethod
    async def register_patient(actor: User, profile: PatientProfile) -> tuple[User, str]:
        """
        Register a patient at the front desk with a temporary password.

        Returns:
            tuple: (patient, temp_password)
        """
        if actor.role not in PATIENT_REGISTRARS:
            raise ForbiddenException("You are not allowed to register patients")
        if not actor.hospital_id:
            raise BadRequestException("You must be associated with a hospital to register patients")

        patient_id = generate_id("PAT", 3)
        temp_password = generate_temp_password(patient_id)

        patient = await AuthService.create_user(
            profile.email,
            temp_password,
            Role.PATIENT,
            patient_id=patient_id,
            hospital_id=actor.hospital_id,
            is_first_login=True,
            registered_by=actor.uid,
            **profile.model_dump(exclude={"email"}),
        )

        try:
            hospital = await Hospital.find_one(Hospital.hospital_id == actor.hospital_id)
            await send_patient_credentials_email(
                email=patient.email,
                name=patient.full_name,
                patient_id=patient_id,
                temp_password=temp_password,
                hospital_name=hospital.name if hospital else "CareLink HMS",
            )
        except Exception as e:
            logger.error(f"Failed to send credentials email to patient {patient_id}: {e}")

        return patient, temp_password

    @staticmethod
    async def register_public_patient(request: PublicPatientRegisterRequest) -> User:
        """Self-service patient registration."""
        hospital = await AuthService.get_hospital(request.hospital_id)
        if hospital.status != HospitalStatus.ACTIVE:
            raise BadRequestException("This hospital is not accepting registrations")

        profile = request.model_dump(
            exclude={"email", "password", "confirm_password", "hospital_id"}
        )
        return await AuthService.create_user(
            request.email,
            request.password,
            Role.PATIENT,
            hospital_id=hospital.hospital_id,
            **profile,
        )

    @staticmethod
    async def register_delivery_partner(request: DeliveryPartnerRegisterRequest) -> User:
        """Delivery partners are not bound to a single hospital."""
        return await AuthService.create_user(
            request.email,
            request.password,
            Role.DELIVERY_PARTNER,
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
        )

    @staticmethod
    async def update_first_login_password(user: User, new_password: str) -> User:
        """Replace the temporary password and clear the first-login flag."""
        if not user.is_first_login:
            raise BadRequestException("Password has already been set")

        user.password_hash = get_password_hash(new_password)
        user.is_first_login = False
        user.update_timestamp()
        await user.save()

        logger.info(f"User {user.reference_id} set a new password on first login")
        return user

    @staticmethod
    async def get_user_by_uid(uid: str) -> Optional[User]:
        """Get user by principal id."""
        return await User.find_one(User.uid == uid)

    @staticmethod
    async def set_user_active(actor: User, uid: str, is_active: bool) -> User:
        """Activate or deactivate a user. Users are never deleted."""
        user = await AuthService.get_user_by_uid(uid)
        if not user:
            raise NotFoundException("User not found")

        if user.uid == actor.uid:
            raise BadRequestException("You cannot change your own active status")

        if actor.role == Role.HOSPITAL_ADMIN:
            if user.hospital_id != actor.hospital_id or user.role == Role.HOSPITAL_ADMIN:
                raise ForbiddenException("You can only manage staff and patients of your hospital")
        elif actor.role != Role.SUPER_ADMIN:
            raise ForbiddenException(describe_auth_error(AuthErrorCode.ADMIN_RESTRICTED_OPERATION))

        user.is_active = is_active
        user.update_timestamp()
        await user.save()

        logger.info(f"User {user.reference_id} {'activated' if is_active else 'deactivated'} by {actor.reference_id}")
        return user

    @staticmethod
    async def list_staff(hospital_id: str, role: Optional[Role] = None) -> List[User]:
        """Staff of a hospital, optionally filtered by role."""
        query = User.find(User.hospital_id == hospital_id, User.role != Role.PATIENT)
        if role is not None:
            query = query.find(User.role == role)
        return await query.sort(User.last_name).to_list()
