import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.repositories.student_repository import IStudentRepository
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import normalize_email
from src.domain.entities import Student
from src.domain.errors import DuplicateRecordError, SessionCreationError
from .dtos import StudentInfo
from .signup_dto import SignupCommand, SignupResponse

logger = logging.getLogger(__name__)


async def find_signup_conflict(
    students: IStudentRepository, email: str, username: str, phone: str
) -> Optional[Error]:
    """Error for the first of email, username, phone already registered"""
    if await students.get_by_email(email):
        return Error(
            "EMAIL_ALREADY_EXISTS",
            "Email already registered. Please login or use forgot password.",
        )
    if await students.get_by_username(username):
        return Error("USERNAME_TAKEN", "Username already taken")
    if await students.get_by_phone(phone):
        return Error("PHONE_TAKEN", "Phone number already registered")
    return None


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[SignupResponse] (structured response)

    Business Logic:
    1. Reject taken email, username or phone
    2. Hash password with bcrypt cost factor 10
    3. Create Student
    4. Start the student's session through the session manager
    5. Commit student and session atomically

    A concurrent signup that wins the unique constraint is reported with
    the same conflict codes as step 1.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        password_hasher: PasswordHasher,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.password_hasher = password_hasher

    async def execute(
        self,
        command: SignupCommand,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Result[SignupResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with validated profile and password
            user_agent: Device metadata stored on the session
            ip_address: Source address stored on the session

        Returns:
            Result[SignupResponse] with tokens and student data, or Error
            (EMAIL_ALREADY_EXISTS, USERNAME_TAKEN, PHONE_TAKEN)
        """
        email = normalize_email(command.email)

        async with self.uow:
            return await self.register(email, command, user_agent, ip_address)

    async def register(
        self,
        email: str,
        command: SignupCommand,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        verified: bool = False,
    ) -> Result[SignupResponse]:
        """
        Create and sign in the student inside the caller's unit of work.

        verified marks the email as proven, as done by the OTP signup.
        """
        conflict = await find_signup_conflict(
            self.uow.students, email, command.username, command.phone
        )
        if conflict:
            return Return.err(conflict)

        student = Student(
            email=email,
            username=command.username,
            name=command.name,
            phone=command.phone,
            password_hash=self.password_hasher.hash(command.password),
            is_verified=verified,
            email_verified=verified,
        )

        try:
            student = await self.uow.students.create(student)

            try:
                issued = await self.session_manager.login(
                    student.id, student.email, user_agent, ip_address
                )
            except SessionCreationError:
                return Return.err(
                    Error("SESSION_CREATION_FAILED", "Failed to create session")
                )

            # Commit transaction atomically
            await self.uow.commit()
        except DuplicateRecordError:
            return Return.err(await self._lost_race(email, command))

        logger.info(f"New user signed up: {student.email}")

        return Return.ok(
            SignupResponse(session=issued.tokens, user=StudentInfo.from_entity(student))
        )

    async def _lost_race(self, email: str, command: SignupCommand) -> Error:
        await self.uow.rollback()
        logger.warning(f"Signup for {email} lost a unique constraint race")
        conflict = await find_signup_conflict(
            self.uow.students, email, command.username, command.phone
        )
        return conflict or Error(
            "EMAIL_ALREADY_EXISTS",
            "Email already registered. Please login or use forgot password.",
        )
