"""TakeSync: line up separately recorded audio and video takes by their timestamps."""
