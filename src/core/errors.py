"""게임 코어 예외 계층

검증 실패(잠긴 레시피, 재료 부족 등)는 예외가 아니라 False + 알림으로 처리한다.
여기 정의된 예외는 호출자에게 전파되어야 하는 경우에만 사용한다.
"""


class PetGameError(Exception):
    """모든 게임 코어 예외의 기반"""


class InvariantViolationError(PetGameError):
    """로직 버그. 검증을 통과한 뒤 상태가 어긋난 경우 (예: 합성 성공 후 조각 부족)"""


class SaveDataError(PetGameError):
    """손상되었거나 필수 필드가 빠진 저장 데이터"""


class UnsupportedSaveVersionError(SaveDataError):
    """현재 지원 버전보다 높은 저장 데이터"""

    def __init__(self, save_version: int, current_version: int) -> None:
        super().__init__(
            f"Save version {save_version} is newer than supported version "
            f"{current_version}; update the game"
        )
        self.save_version = save_version
        self.current_version = current_version


class SaveInProgressError(PetGameError):
    """저장 진행 중 재진입"""


class InvalidSlotError(PetGameError):
    """범위를 벗어난 저장 슬롯"""


class SaveNotFoundError(PetGameError):
    """비어 있는 저장 슬롯"""
