"""이벤트 유형 상수

각 코어 컴포넌트가 발행하는 이벤트 문자열.
데이터에는 식별자와 수치만 담는다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # synthesis
    SYNTHESIS_PHASE_CHANGED = "synthesis_phase_changed"
    PET_SYNTHESIZED = "pet_synthesized"
    SYNTHESIS_FAILED = "synthesis_failed"

    # outdoor
    PLAY_STARTED = "play_started"
    PLAY_FINISHED = "play_finished"
    HUNT_STARTED = "hunt_started"
    HUNT_FINISHED = "hunt_finished"
    OUTDOOR_RECALLED = "outdoor_recalled"
    PET_DIED = "pet_died"
    FRAGMENT_DROPPED = "fragment_dropped"

    # pet
    PET_LEVELED_UP = "pet_leveled_up"
    PET_FED = "pet_fed"

    # buff
    BUFF_ACTIVATED = "buff_activated"
    BUFF_CONSUMED = "buff_consumed"

    # save
    GAME_SAVED = "game_saved"
    GAME_LOADED = "game_loaded"
